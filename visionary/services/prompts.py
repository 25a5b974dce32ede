"""
Curated prompt and status text, plus the random helpers that draw from them.

The helpers take an explicit ``random.Random`` so callers can seed them.
"""
import random
import uuid

from uuid_extensions import uuid7

SAMPLE_PROMPTS = (
    "A majestic phoenix rising from crystal ashes, cinematic lighting, 8k resolution",
    "Cyberpunk street market in Tokyo, neon rain, hyper-realistic, intricate details",
    "An underwater library with glowing jellyfish, ethereal atmosphere, digital art",
    "A tiny dragon sleeping on a pile of gold coins, macro photography, soft bokeh",
    "Surreal landscape where mountains are made of floating silk, pastel colors",
    "Astronaut sitting on a swing attached to a crescent moon, starry background",
)

STATUS_MESSAGES = (
    "Analyzing your vision...",
    "Sketching the composition...",
    "Applying artistic textures...",
    "Optimizing lighting and shadows...",
    "Finalizing high-quality details...",
    "Almost there...",
)


def pick_random_prompt(rng: random.Random, samples=SAMPLE_PROMPTS) -> str:
    """Uniformly pick one of the sample prompts."""
    if not samples:
        raise ValueError("samples must not be empty")
    return rng.choice(samples)


def new_image_id(rng: random.Random | None = None) -> str:
    """
    Generate a gallery entry id.

    Without a random source the id is a time-ordered UUIDv7; with one it is a
    UUIDv4 built from ``rng`` so seeded sessions produce repeatable ids.
    """
    if rng is None:
        return str(uuid7())
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))
