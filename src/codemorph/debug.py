"""Human-readable dumps of token streams, diffs, and timelines."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import TextIO

from codemorph.diff import summarize
from codemorph.engine import Transition
from codemorph.languages import language_tag
from codemorph.timing import Phase, describe
from codemorph.tokens import DiffToken, Token


def dump_tokens(tokens: Sequence[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one line per token: index, type, content, id."""
    for i, tok in enumerate(tokens):
        file.write(f"{i:4d}  {tok.type.value:<11} {tok.content!r:<24} {tok.id}\n")


def dump_diff(tokens: Sequence[DiffToken], *, file: TextIO = sys.stderr) -> None:
    """Print one line per classified token with its status and indices."""
    marks = {"unchanged": " ", "added": "+", "removed": "-"}
    for tok in tokens:
        old = "-" if tok.old_index is None else str(tok.old_index)
        new = "-" if tok.new_index < 0 else str(tok.new_index)
        flag = "*" if tok.highlighted else " "
        file.write(
            f"{marks[tok.status.value]}{flag} {old:>4} {new:>4}  "
            f"{tok.type.value:<11} {tok.content!r}\n"
        )


def write_report(transition: Transition, *, file: TextIO = sys.stdout) -> None:
    """Print the transition summary, its phase timeline, and the diff."""
    counts = summarize(transition.tokens)
    file.write(f"language: {language_tag(transition.language)}\n")
    file.write(
        f"tokens: {counts['unchanged']} unchanged, {counts['added']} added, "
        f"{counts['removed']} removed\n"
    )

    schedule = transition.schedule
    if schedule is None:
        file.write("static display (no animation)\n")
    else:
        file.write(f"total duration: {schedule.total_duration:g} ms\n")
        for window in schedule.windows():
            if window.phase == Phase.COMPLETE:
                span = f"{window.start:>7g} ms ->"
            else:
                span = f"{window.start:>7g} ms +{window.duration:g} ms"
            file.write(f"  {window.phase.value:<12} {span:<22} {describe(window.phase)}\n")

    file.write("\n")
    dump_diff(transition.tokens, file=file)
