"""Pydantic schemas for a single delivery.

A delivery is a tagged union on ``kind``. Each variant carries the runs
scored and an optional dismissal, and rejects dismissal kinds that cannot
happen off that type of ball.
"""

from typing import Annotated, ClassVar, FrozenSet, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator, model_validator

from .scorecard import DismissalKind, ExtrasType


class Dismissal(BaseModel):
    """How the striker got out on this ball."""

    kind: DismissalKind = Field(..., description="Dismissal kind")
    fielder: Optional[str] = Field(None, max_length=100, description="Catcher, keeper or thrower")

    @field_validator("kind")
    @classmethod
    def validate_kind(cls, v: DismissalKind) -> DismissalKind:
        if not v.is_dismissal:
            raise ValueError(f"'{v.value}' is not a dismissal")
        return v


class DeliveryBase(BaseModel):
    """Fields shared by every delivery kind."""

    runs: int = Field(0, ge=0, le=6, description="Runs run or hit off this ball")
    dismissal: Optional[Dismissal] = Field(None, description="Set when a wicket fell")

    allowed_dismissals: ClassVar[Optional[FrozenSet[DismissalKind]]] = None
    extras_type: ClassVar[Optional[ExtrasType]] = None
    is_legal: ClassVar[bool] = True

    @model_validator(mode="after")
    def validate_dismissal(self):
        """Reject dismissals that cannot happen off this kind of ball."""
        allowed = self.allowed_dismissals
        if self.dismissal is not None and allowed is not None and self.dismissal.kind not in allowed:
            raise ValueError(
                f"{self.dismissal.kind.value} is not possible off a {self.kind.replace('_', '-')}"
            )
        return self

    @property
    def is_wicket(self) -> bool:
        return self.dismissal is not None


class NormalDelivery(DeliveryBase):
    kind: Literal["normal"] = "normal"


class WideDelivery(DeliveryBase):
    """Illegal ball. Every run goes to wides."""

    kind: Literal["wide"] = "wide"

    allowed_dismissals: ClassVar[Optional[FrozenSet[DismissalKind]]] = frozenset({
        DismissalKind.RUN_OUT,
        DismissalKind.STUMPED,
        DismissalKind.HIT_WICKET,
        DismissalKind.OBSTRUCTING_FIELD,
    })
    extras_type: ClassVar[Optional[ExtrasType]] = ExtrasType.WIDE
    is_legal: ClassVar[bool] = False


class NoBallDelivery(DeliveryBase):
    """Illegal ball. The penalty run is an extra, bat runs go to the striker."""

    kind: Literal["no_ball"] = "no_ball"

    allowed_dismissals: ClassVar[Optional[FrozenSet[DismissalKind]]] = frozenset({
        DismissalKind.RUN_OUT,
        DismissalKind.OBSTRUCTING_FIELD,
    })
    extras_type: ClassVar[Optional[ExtrasType]] = ExtrasType.NO_BALL
    is_legal: ClassVar[bool] = False


class ByeDelivery(DeliveryBase):
    kind: Literal["bye"] = "bye"

    extras_type: ClassVar[Optional[ExtrasType]] = ExtrasType.BYE


class LegByeDelivery(DeliveryBase):
    kind: Literal["leg_bye"] = "leg_bye"

    extras_type: ClassVar[Optional[ExtrasType]] = ExtrasType.LEG_BYE


Delivery = Annotated[
    Union[NormalDelivery, WideDelivery, NoBallDelivery, ByeDelivery, LegByeDelivery],
    Field(discriminator="kind"),
]

delivery_adapter = TypeAdapter(Delivery)


def parse_delivery(data: dict) -> DeliveryBase:
    """Validate a raw mapping into the matching delivery variant."""
    return delivery_adapter.validate_python(data)


def delivery_from_flags(
    runs: int = 0,
    is_wide: bool = False,
    is_no_ball: bool = False,
    is_wicket: bool = False,
    is_bye: bool = False,
    is_leg_bye: bool = False,
    dismissal_kind: Optional[Union[DismissalKind, str]] = None,
    fielder: Optional[str] = None,
) -> DeliveryBase:
    """Build a delivery from the boolean flag form used by scoring pads.

    At most one extras flag may be set. A wicket without a kind defaults to
    Bowled off a legal ball and Run Out off a wide or no-ball.
    """
    flags = {"wide": is_wide, "no_ball": is_no_ball, "bye": is_bye, "leg_bye": is_leg_bye}
    kinds = [kind for kind, flag in flags.items() if flag]
    if len(kinds) > 1:
        raise ValueError(f"Only one extras type per delivery, got: {', '.join(kinds)}")
    kind = kinds[0] if kinds else "normal"

    data = {"kind": kind, "runs": runs}
    if is_wicket:
        if dismissal_kind is None:
            dismissal_kind = DismissalKind.RUN_OUT if kind in ("wide", "no_ball") else DismissalKind.BOWLED
        data["dismissal"] = {"kind": dismissal_kind, "fielder": fielder}

    return parse_delivery(data)


class PendingWicket(BaseModel):
    """A delivery that signalled a wicket, waiting for dismissal details."""

    delivery: Delivery
    innings_index: int = Field(..., ge=0, le=1)

    def confirm(self, kind: Union[DismissalKind, str], fielder: Optional[str] = None) -> DeliveryBase:
        """Return the parked delivery with its dismissal attached."""
        dismissal = Dismissal(kind=kind, fielder=fielder)
        data = self.delivery.model_dump()
        data["dismissal"] = dismissal.model_dump()
        return parse_delivery(data)
