"""Subword vocabulary of the CTC acoustic model."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Union

from pron_core.config import BLANK_ID, BLANK_PIECE, UNK_ID

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Vocabulary:
    """Bidirectional piece <-> id map loaded from a ``tokens.txt`` resource.

    Attributes:
        piece_to_id: SentencePiece piece -> model output index
        id_to_piece: Model output index -> piece
        blank_id: Index of the CTC blank symbol
        unk_id: Index used for characters missing from the vocabulary
    """
    piece_to_id: Dict[str, int] = field(default_factory=dict)
    id_to_piece: Dict[int, str] = field(default_factory=dict)
    blank_id: int = BLANK_ID
    unk_id: int = UNK_ID

    def __len__(self) -> int:
        return len(self.piece_to_id)

    def __contains__(self, piece: object) -> bool:
        return piece in self.piece_to_id

    def get_id(self, piece: str) -> Optional[int]:
        return self.piece_to_id.get(piece)

    def get_piece(self, idx: int) -> str:
        return self.id_to_piece.get(idx, "")

    @classmethod
    def from_text(
        cls,
        text: str,
        blank_id: Optional[int] = None,
        unk_id: int = UNK_ID,
    ) -> "Vocabulary":
        """Parse ``"<piece> <id>"`` lines.

        Each line is split on its last space so pieces may themselves contain
        spaces. Lines without a space or with a non-integer id are skipped.

        Args:
            text: Full contents of the tokens file
            blank_id: Blank index; defaults to the ``<blk>`` entry if present,
                else the model's fixed blank index
            unk_id: Index for unknown characters

        Returns:
            Loaded Vocabulary
        """
        piece_to_id: Dict[str, int] = {}
        id_to_piece: Dict[int, str] = {}

        for line_no, line in enumerate(text.strip().split("\n"), start=1):
            line = line.rstrip("\r")
            last_space = line.rfind(" ")
            if last_space == -1:
                logger.debug("Skipping tokens line %d without separator: %r", line_no, line)
                continue
            piece = line[:last_space]
            try:
                idx = int(line[last_space + 1:])
            except ValueError:
                logger.debug("Skipping tokens line %d with bad id: %r", line_no, line)
                continue
            piece_to_id[piece] = idx
            id_to_piece[idx] = piece

        if blank_id is None:
            blank_id = piece_to_id.get(BLANK_PIECE, BLANK_ID)

        logger.info("Loaded vocabulary: %d pieces, blank=%d", len(piece_to_id), blank_id)
        return cls(piece_to_id=piece_to_id, id_to_piece=id_to_piece, blank_id=blank_id, unk_id=unk_id)

    @classmethod
    def from_file(cls, path: Union[str, Path], **kwargs) -> "Vocabulary":
        return cls.from_text(Path(path).read_text(encoding="utf-8"), **kwargs)
