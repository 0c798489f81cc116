"""
Reading the moves out of pasted PGN movetext

ex) "1. e4 c5 2. Nf3 {the main line} d6 (2... Nc6) 3. d4!? cxd4 *"
gives ["e4", "c5", "Nf3", "d6", "d4", "cxd4"]

NOTE: Only the movetext. Tag pairs ([Event "..."]) are not parsed.
"""

import re

COMMENT = re.compile(r"\{[^}]*\}")
# innermost variation only: removing those repeatedly takes care of nested variations
VARIATION = re.compile(r"\([^()]*\)")
MOVE_NUMBER = re.compile(r"\d+\.(?:\.\.)?")
NAG = re.compile(r"\$\d+")
MOVE_ANNOTATION = re.compile(r"[!?]+")

RESULT_TOKENS = {"1-0", "0-1", "1/2-1/2", "*"}


def remove_variations(movetext: str) -> str:
    while VARIATION.search(movetext):
        movetext = VARIATION.sub(" ", movetext)
    return movetext


def parse_movetext(movetext: str) -> list[str]:
    """Split movetext into SAN tokens, dropping everything that is not a move."""
    text = COMMENT.sub(" ", movetext)
    text = remove_variations(text)
    text = MOVE_NUMBER.sub(" ", text)
    text = NAG.sub(" ", text)
    text = MOVE_ANNOTATION.sub("", text)
    return [token for token in text.split() if token not in RESULT_TOKENS]
