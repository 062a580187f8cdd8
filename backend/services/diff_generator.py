"""
Diff Generator Service - Line-level diffs between two versions of a document
"""

from __future__ import annotations

from difflib import unified_diff
from typing import Iterator, Sequence

from diff_match_patch import diff_match_patch

from models.diff import ChangeKind, DiffBlock, DiffSummary, LineChange

DEFAULT_CONTEXT_LINES = 3

_RUN_KINDS = {
    diff_match_patch.DIFF_EQUAL: ChangeKind.UNCHANGED,
    diff_match_patch.DIFF_DELETE: ChangeKind.DELETED,
    diff_match_patch.DIFF_INSERT: ChangeKind.ADDED,
}


def split_lines(content: str) -> list[str]:
    """Split on newlines, dropping the empty line a terminal newline leaves behind"""
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def _terminated(lines: Sequence[str]) -> str:
    return "".join(f"{line}\n" for line in lines)


def line_runs(old_lines: Sequence[str], new_lines: Sequence[str]) -> Iterator[tuple[ChangeKind, list[str]]]:
    """Minimal (Myers) line diff as runs of equal, deleted and inserted lines.

    Every line is newline-terminated before diffing so the last line of a
    document matches regardless of a trailing newline.
    """
    dmp = diff_match_patch()
    dmp.Diff_Timeout = 0  # no deadline, always the shortest edit script
    old_chars, new_chars, line_table = dmp.diff_linesToChars(
        _terminated(old_lines), _terminated(new_lines)
    )
    runs = dmp.diff_main(old_chars, new_chars, False)
    dmp.diff_charsToLines(runs, line_table)

    for op, text in runs:
        yield _RUN_KINDS[op], split_lines(text)


class DiffGenerator:
    """Compute line diffs and group them into display blocks"""

    def compute_diff(
        self,
        old_content: str,
        new_content: str,
        include_line_numbers: bool = True,
    ) -> list[LineChange]:
        """Classify every line of the merged document as added, deleted or unchanged.

        A modified line comes out as a deletion of the old text immediately
        followed by an addition of the new text. Deleted lines are numbered
        with the position they would occupy but do not consume it.
        """
        result: list[LineChange] = []
        line_number = 1

        for kind, lines in line_runs(split_lines(old_content), split_lines(new_content)):
            for line in lines:
                result.append(
                    LineChange(
                        kind=kind,
                        text=line,
                        line_number=line_number if include_line_numbers else 0,
                    )
                )
                if kind is not ChangeKind.DELETED:
                    line_number += 1
        return result

    def group_into_blocks(
        self,
        changes: Sequence[LineChange],
        context_lines: int = DEFAULT_CONTEXT_LINES,
    ) -> list[DiffBlock]:
        """Keep changed lines plus `context_lines` of context around them.

        Clusters whose kept lines are more than ``2 * context_lines + 1``
        apart become separate blocks; closer clusters are merged, including
        the unchanged lines between them.
        """
        if not changes:
            return []

        context_lines = max(0, context_lines)
        changed = [i for i, c in enumerate(changes) if c.kind is not ChangeKind.UNCHANGED]

        if not changed:
            return [
                DiffBlock(
                    changes=list(changes),
                    start_line=1,
                    end_line=len(changes),
                    has_changes=False,
                )
            ]

        kept = [False] * len(changes)
        for index in changed:
            lo = max(0, index - context_lines)
            hi = min(len(changes) - 1, index + context_lines)
            for i in range(lo, hi + 1):
                kept[i] = True

        positions = self._positions(changes)
        max_gap = context_lines * 2 + 1
        blocks: list[DiffBlock] = []
        current: list[int] = []

        for index, keep in enumerate(kept):
            if not keep:
                continue
            if current:
                gap = index - current[-1]
                if gap > max_gap:
                    blocks.append(self._build_block(changes, current, positions))
                    current = []
                elif gap > 1:
                    current.extend(range(current[-1] + 1, index))
            current.append(index)

        if current:
            blocks.append(self._build_block(changes, current, positions))

        return blocks

    def _positions(self, changes: Sequence[LineChange]) -> list[int]:
        """Running new-document position of each change, whether or not it was numbered"""
        positions = []
        position = 1
        for change in changes:
            positions.append(position)
            if change.kind is not ChangeKind.DELETED:
                position += 1
        return positions

    def _build_block(
        self,
        changes: Sequence[LineChange],
        indices: list[int],
        positions: list[int],
    ) -> DiffBlock:
        first, last = indices[0], indices[-1]
        block_changes = [changes[i] for i in indices]
        return DiffBlock(
            changes=block_changes,
            start_line=changes[first].line_number or positions[first],
            end_line=changes[last].line_number or positions[last],
            has_changes=any(c.kind is not ChangeKind.UNCHANGED for c in block_changes),
        )

    def hidden_line_counts(self, blocks: Sequence[DiffBlock]) -> list[int]:
        """Number of lines collapsed between each block and the next one"""
        counts = [
            max(0, following.start_line - block.end_line - 1)
            for block, following in zip(blocks, blocks[1:])
        ]
        if blocks:
            counts.append(0)
        return counts

    def summarize(self, changes: Sequence[LineChange]) -> DiffSummary:
        """Count additions, deletions and unchanged lines"""
        summary = DiffSummary()
        for change in changes:
            if change.kind is ChangeKind.ADDED:
                summary.additions += 1
            elif change.kind is ChangeKind.DELETED:
                summary.deletions += 1
            else:
                summary.unchanged += 1
        return summary

    def contents_equal(self, old_content: str, new_content: str) -> bool:
        """Exact equality, whitespace and line endings included"""
        return old_content == new_content

    def unified_diff(
        self,
        old_content: str,
        new_content: str,
        file_path: str,
        context_lines: int = DEFAULT_CONTEXT_LINES,
    ) -> str:
        """Render the change as `a/`/`b/` unified diff text, lines split the same way as compute_diff"""
        hunks = unified_diff(
            split_lines(old_content),
            split_lines(new_content),
            fromfile=f"a/{file_path}",
            tofile=f"b/{file_path}",
            n=max(0, context_lines),
            lineterm="",
        )
        return "".join(f"{line}\n" for line in hunks)
