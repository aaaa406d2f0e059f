# migraflow/convert/ids.py

import random
import uuid
from typing import Callable

IdFactory = Callable[[], str]


def uuid4_factory() -> IdFactory:
    return lambda: str(uuid.uuid4())


def seeded_id_factory(seed: int) -> IdFactory:
    """Reproducible UUID4-shaped ids, for golden files and diffs between runs."""
    rng = random.Random(seed)

    def _next() -> str:
        return str(uuid.UUID(int=rng.getrandbits(128), version=4))

    return _next
