from __future__ import annotations

import hashlib

from forest_planner.domain.board import BoardState


def planner_seed(board: BoardState, requested_seed: int | None, *, salt: str) -> int:
    """Return the RNG seed for a bot session.

    If the user supplied `requested_seed`, preserve it exactly. Otherwise derive
    a stable seed from the board topology + salt so repeated runs on the same
    board draw the same stream.
    """
    if requested_seed is not None:
        return int(requested_seed)

    payload = f"{board.signature()}|{salt}".encode("utf-8")
    return int.from_bytes(hashlib.blake2b(payload, digest_size=8).digest(), "big")
