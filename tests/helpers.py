"""Shared test doubles and Hypothesis strategies."""

from __future__ import annotations

import random

from hypothesis import strategies as st

from localepack.output import EmittedAsset


class RecordingContext:
    """PluginContext that keeps emitted assets and warnings in memory."""

    def __init__(self) -> None:
        self.assets: list[EmittedAsset] = []
        self.warnings: list[str] = []

    def emit_file(self, asset: EmittedAsset) -> str:
        self.assets.append(asset)
        return asset.file_name

    def warn(self, message: str) -> None:
        self.warnings.append(message)


class FixedRandom(random.Random):
    """Random source whose randrange always returns the same value."""

    def __init__(self, value: int) -> None:
        super().__init__(0)
        self.value = value

    def randrange(self, *args: object, **kwargs: object) -> int:  # type: ignore[override]
        return self.value


json_scalars = (
    st.none()
    | st.booleans()
    | st.integers(min_value=-(2**63), max_value=2**63)
    | st.floats(allow_nan=False, allow_infinity=False)
    | st.text()
)

json_values = st.recursive(
    json_scalars,
    lambda children: st.lists(children, max_size=5)
    | st.dictionaries(st.text(max_size=10), children, max_size=5),
    max_leaves=20,
)
