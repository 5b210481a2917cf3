"""Grid track templates: parsing into track descriptors and sizing to pixels.

A template such as ``"100px 2fr minmax(120px, 1fr)"`` becomes a list of
:class:`FixedTrack` / :class:`FractionalTrack` descriptors, which
:func:`size_tracks` resolves against an axis length and gap. Lengths stay
floating point; rounding is left to whoever finally resizes a surface node.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Union

from packages.contracts.normalization import leading_float

MAX_TRACKS = 500
# Estimated width of one fr unit when guessing how many auto repetitions fit.
FR_BASELINE_PX = 100.0

_REPEAT_RE = re.compile(r"repeat\s*\(", re.IGNORECASE)
_MINMAX_RE = re.compile(r"^minmax\s*\(\s*([^,]+?)\s*,\s*(.+?)\s*\)$", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class MinMaxMeta:
    min_px: float
    max_fr: float


@dataclass(frozen=True, slots=True)
class FixedTrack:
    px: float
    minmax: MinMaxMeta | None = None


@dataclass(frozen=True, slots=True)
class FractionalTrack:
    fr: float


Track = Union[FixedTrack, FractionalTrack]


def split_tracks(text: str) -> list[str]:
    """Split on whitespace at paren depth zero, so ``minmax(a, b)`` stays whole."""
    parts: list[str] = []
    buf: list[str] = []
    depth = 0
    for ch in text:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)
        elif depth == 0 and ch.isspace():
            if buf:
                parts.append("".join(buf))
                buf = []
            continue
        buf.append(ch)
    if buf:
        parts.append("".join(buf))
    return parts


def _fr_factor(token: str) -> float:
    value = leading_float(token)
    if value is None or value <= 0:
        return 1.0
    return value


def _is_fr(token: str) -> bool:
    # leftovers of unbalanced functions such as "repeat(2, 1fr" are not fr tracks
    return token.endswith("fr") and "(" not in token


def _length_px(token: str, basis: float) -> float | None:
    lowered = token.strip().lower()
    value = leading_float(lowered)
    if lowered.endswith("px"):
        return value or 0.0
    if lowered.endswith("%"):
        return (value or 0.0) / 100.0 * basis
    return None


def _estimate_repetition_width(inner: str, total: float) -> float:
    width = 0.0
    for token in split_tracks(inner):
        lowered = token.lower()
        minmax = _MINMAX_RE.match(lowered)
        if minmax:
            width += _length_px(minmax.group(1), total) or 0.0
        elif _is_fr(lowered):
            width += FR_BASELINE_PX * _fr_factor(lowered)
        else:
            width += _length_px(lowered, total) or 0.0
    return width


def _find_repeat(text: str) -> tuple[int, int, str, str] | None:
    """Locate the first ``repeat(count, tracks)`` clause with balanced parens."""
    match = _REPEAT_RE.search(text)
    if not match:
        return None
    depth = 1
    comma = -1
    idx = match.end()
    while idx < len(text) and depth:
        ch = text[idx]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "," and depth == 1 and comma < 0:
            comma = idx
        idx += 1
    if depth or comma < 0:
        return None
    count = text[match.end():comma].strip()
    inner = text[comma + 1:idx - 1].strip()
    return match.start(), idx, count, inner


def expand_repeats(spec: str, total: float, max_tracks: int = MAX_TRACKS) -> str:
    """Expand ``repeat()`` clauses in place.

    ``auto-fill``/``auto-fit`` is a heuristic: one repetition is estimated at
    the sum of its px and % lengths, the min side of any ``minmax()`` and
    ``FR_BASELINE_PX`` per fr unit, and ``count = max(1, floor(total / width))``.
    Every expansion is capped so the template never exceeds ``max_tracks``.
    """
    text = spec
    while True:
        found = _find_repeat(text)
        if found is None:
            return text
        start, end, count_text, inner = found
        inner_tracks = max(1, len(split_tracks(inner)))
        lowered = count_text.lower()
        if lowered in {"auto-fill", "auto-fit"}:
            width = _estimate_repetition_width(inner, total)
            count = max(1, math.floor((total + 1e-6) / width)) if width > 0 else 1
        else:
            count = max(1, int(leading_float(lowered) or 1))
        existing = len(split_tracks(text[:start] + " " + text[end:]))
        budget = max(1, (max_tracks - existing) // inner_tracks)
        count = min(count, budget)
        text = text[:start] + " ".join([inner] * count) + text[end:]


def parse_track_spec(
    spec: str | None,
    total: float,
    gap: float = 0.0,
    max_tracks: int = MAX_TRACKS,
) -> list[Track] | None:
    if not spec or not spec.strip():
        return None
    tokens = split_tracks(expand_repeats(spec.strip(), total, max_tracks))[:max_tracks]
    if not tokens:
        return None
    # Percentages resolve against the track area, i.e. the axis minus its gaps.
    basis = max(0.0, total - gap * (len(tokens) - 1))
    tracks: list[Track] = []
    for token in tokens:
        lowered = token.lower()
        minmax = _MINMAX_RE.match(lowered)
        if minmax:
            min_px = _length_px(minmax.group(1), basis)
            if min_px is None:
                tracks.append(FixedTrack(0.0))
            elif minmax.group(2).endswith("fr"):
                meta = MinMaxMeta(min_px=min_px, max_fr=_fr_factor(minmax.group(2)))
                tracks.append(FixedTrack(min_px, minmax=meta))
            else:
                tracks.append(FixedTrack(min_px))
        elif _is_fr(lowered):
            tracks.append(FractionalTrack(_fr_factor(lowered)))
        else:
            tracks.append(FixedTrack(_length_px(lowered, basis) or 0.0))
    return tracks


def size_tracks(tracks: list[Track], total: float, gap: float = 0.0) -> list[float]:
    if not tracks:
        return []
    fixed_sum = sum(t.px for t in tracks if isinstance(t, FixedTrack))
    fr_sum = sum(t.fr for t in tracks if isinstance(t, FractionalTrack))
    available = max(0.0, total - gap * (len(tracks) - 1))
    if fr_sum == 0:
        return [t.px if isinstance(t, FixedTrack) else 0.0 for t in tracks]

    per_fr = max(0.0, available - fixed_sum) / fr_sum
    sizes: list[float] = []
    for track in tracks:
        if isinstance(track, FractionalTrack):
            sizes.append(per_fr * track.fr)
        elif track.minmax is not None:
            sizes.append(max(track.minmax.min_px, per_fr * track.minmax.max_fr))
        else:
            sizes.append(track.px)
    return sizes


def resolve_track_list(
    spec: str | None,
    total: float,
    gap: float = 0.0,
    max_tracks: int = MAX_TRACKS,
) -> list[float] | None:
    """Pixel length per track for one axis, or None when there is no template."""
    tracks = parse_track_spec(spec, total, gap, max_tracks)
    if tracks is None:
        return None
    return size_tracks(tracks, total, gap)
