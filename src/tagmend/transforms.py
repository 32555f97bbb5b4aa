"""Transforms and pipelines that undo legacy mis-encoding chains.

Each pipeline is one hypothesis about how Cyrillic text was mangled on its
way into a Latin-1 frame. Values move through the steps as either ``str``
(Unicode) or ``bytes`` (raw code-page bytes):

- ``Decode(codec)`` turns code-page bytes into text. Text input is taken as
  its UTF-8 bytes, which is how the tag library hands over frames that were
  never really Latin-1.
- ``Encode(codec)`` turns text into code-page bytes. Bytes input has to be
  valid UTF-8 first.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from tagmend.errors import TransformError

logger = logging.getLogger(__name__)

SOURCE_CODEPAGE = "cp1251"
MISLABEL_CODEPAGE = "latin-1"
# Truncation retry only applies to values longer than this.
RETRY_MIN_LENGTH = 4

Value = str | bytes


def dump(value: Value) -> str:
    """Show a value with both its repr and hex bytes."""
    raw = value if isinstance(value, bytes) else value.encode("utf-8", errors="surrogatepass")
    return f"{value!r} [{raw.hex(' ')}]"


def as_text(value: Value) -> str:
    """Render a pipeline result as text; bytes are read as UTF-8."""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def show(value: Value) -> str:
    """Render a field value for reports; raw bytes appear as hex, never decoded."""
    return value.hex(" ") if isinstance(value, bytes) else value


@dataclass(frozen=True)
class Decode:
    codec: str

    @property
    def name(self) -> str:
        return f"decode:{self.codec}"

    def __call__(self, value: Value) -> str:
        try:
            raw = value.encode("utf-8") if isinstance(value, str) else value
            return raw.decode(self.codec)
        except UnicodeError as exc:
            raise TransformError(self.name, str(exc)) from exc


@dataclass(frozen=True)
class Encode:
    codec: str

    @property
    def name(self) -> str:
        return f"encode:{self.codec}"

    def __call__(self, value: Value) -> bytes:
        try:
            text = value.decode("utf-8") if isinstance(value, bytes) else value
            return text.encode(self.codec)
        except UnicodeError as exc:
            raise TransformError(self.name, str(exc)) from exc


Transform = Decode | Encode


@dataclass(frozen=True)
class Pipeline:
    name: str
    steps: tuple[Transform, ...]

    def describe(self) -> str:
        return " -> ".join(step.name for step in self.steps)


def build_pipelines(
    source: str = SOURCE_CODEPAGE, mislabel: str = MISLABEL_CODEPAGE
) -> tuple[Pipeline, ...]:
    """The four canonical hypotheses over a (true, mislabeled) code-page pair."""
    return (
        Pipeline("direct", (Decode(source),)),
        Pipeline("reencode-roundtrip", (Encode(source), Encode(mislabel), Decode(source))),
        Pipeline("single-roundtrip", (Encode(mislabel), Decode(source))),
        # the frame's encoding byte is wrong, the payload is fine
        Pipeline("mislabel-only", (Encode(mislabel),)),
    )


PIPELINES: tuple[Pipeline, ...] = build_pipelines()


def apply_step(step: Transform, value: Value) -> Value:
    """Apply one step, retrying once without the last element on failure."""
    try:
        return step(value)
    except TransformError:
        if len(value) <= RETRY_MIN_LENGTH:
            raise
        logger.debug("  %s failed on %s, retrying without last element", step.name, dump(value))
        return step(value[:-1])


def execute(value: Value, pipeline: Pipeline) -> Value:
    """Run ``pipeline`` over ``value``; raises TransformError if a step fails."""
    for step in pipeline.steps:
        try:
            converted = apply_step(step, value)
        except TransformError as exc:
            exc.pipeline = pipeline.name
            logger.debug("  %s: %s failed on %s", pipeline.name, step.name, dump(value))
            raise
        logger.debug("  converted %s => %s", dump(value), dump(converted))
        value = converted
    return value


def run_all(value: Value, pipelines: Sequence[Pipeline] = PIPELINES) -> dict[str, Value | None]:
    """Execute every pipeline, mapping failures to None."""
    results: dict[str, Value | None] = {}
    for pipeline in pipelines:
        try:
            results[pipeline.name] = execute(value, pipeline)
        except TransformError:
            results[pipeline.name] = None
    return results
