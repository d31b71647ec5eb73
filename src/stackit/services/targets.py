"""Vote directions and the targets they apply to."""
from __future__ import annotations

import enum
from dataclasses import dataclass

from stackit.core.errors import InvalidArgumentError
from stackit.models import Answer, Question, Vote


class VoteDirection(enum.IntEnum):
    """Stored direction of a vote; the value is its contribution to the score."""

    UP = 1
    DOWN = -1

    @property
    def label(self) -> str:
        return "up" if self is VoteDirection.UP else "down"

    @classmethod
    def parse(cls, raw: object) -> VoteDirection:
        """Return the direction named by ``raw``.

        Accepts exactly ``"up"`` or ``"down"``, or a direction instance.

        Raises:
            InvalidArgumentError: For anything else.
        """
        if isinstance(raw, cls):
            return raw
        if raw == "up":
            return cls.UP
        if raw == "down":
            return cls.DOWN
        raise InvalidArgumentError("Invalid vote type, expected 'up' or 'down'")


class TargetKind(str, enum.Enum):
    QUESTION = "question"
    ANSWER = "answer"

    @property
    def model(self) -> type[Question] | type[Answer]:
        return Question if self is TargetKind.QUESTION else Answer

    @property
    def ledger_column(self):  # noqa: ANN201 - SQLAlchemy column attribute
        return Vote.question_id if self is TargetKind.QUESTION else Vote.answer_id


@dataclass(frozen=True)
class VoteTarget:
    """A question or an answer, identified by id."""

    kind: TargetKind
    id: int

    @classmethod
    def question(cls, question_id: int) -> VoteTarget:
        return cls(TargetKind.QUESTION, question_id)

    @classmethod
    def answer(cls, answer_id: int) -> VoteTarget:
        return cls(TargetKind.ANSWER, answer_id)

    @property
    def model(self) -> type[Question] | type[Answer]:
        return self.kind.model

    @property
    def ledger_column(self):  # noqa: ANN201 - SQLAlchemy column attribute
        return self.kind.ledger_column
