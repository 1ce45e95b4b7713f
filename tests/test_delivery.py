import pytest
from pydantic import ValidationError

from cricket_scoring.schemas import (
    ByeDelivery,
    Dismissal,
    DismissalKind,
    LegByeDelivery,
    NoBallDelivery,
    NormalDelivery,
    PendingWicket,
    WideDelivery,
    delivery_from_flags,
    parse_delivery,
)


def test_parse_picks_variant_by_kind():
    delivery = parse_delivery({"kind": "leg_bye", "runs": 2})
    assert isinstance(delivery, LegByeDelivery)
    assert delivery.is_legal
    assert delivery.extras_type.value == "LB"


def test_wide_cannot_be_caught():
    with pytest.raises(ValidationError):
        WideDelivery(dismissal=Dismissal(kind=DismissalKind.CAUGHT))


def test_wide_can_be_stumped():
    delivery = WideDelivery(dismissal=Dismissal(kind=DismissalKind.STUMPED, fielder="Keeper"))
    assert delivery.is_wicket
    assert not delivery.is_legal


def test_no_ball_allows_only_run_out_or_obstruction():
    NoBallDelivery(runs=1, dismissal=Dismissal(kind=DismissalKind.RUN_OUT))
    with pytest.raises(ValidationError):
        NoBallDelivery(dismissal=Dismissal(kind=DismissalKind.BOWLED))
    with pytest.raises(ValidationError):
        NoBallDelivery(dismissal=Dismissal(kind=DismissalKind.STUMPED))


def test_bye_allows_any_dismissal():
    assert ByeDelivery(runs=1, dismissal=Dismissal(kind=DismissalKind.CAUGHT)).is_wicket


def test_dismissal_rejects_non_dismissals():
    for kind in (DismissalKind.NOT_OUT, DismissalKind.DID_NOT_BAT, DismissalKind.RETIRED_HURT):
        with pytest.raises(ValidationError):
            Dismissal(kind=kind)


def test_runs_are_bounded():
    with pytest.raises(ValidationError):
        NormalDelivery(runs=7)
    with pytest.raises(ValidationError):
        NormalDelivery(runs=-1)


def test_flags_build_matching_delivery():
    assert isinstance(delivery_from_flags(runs=1, is_no_ball=True), NoBallDelivery)
    assert isinstance(delivery_from_flags(runs=3), NormalDelivery)


def test_flags_reject_two_extras():
    with pytest.raises(ValueError, match="Only one extras type"):
        delivery_from_flags(runs=1, is_wide=True, is_bye=True)


def test_flags_default_dismissal_kind():
    assert delivery_from_flags(is_wicket=True).dismissal.kind == DismissalKind.BOWLED
    wide = delivery_from_flags(is_wide=True, is_wicket=True)
    assert wide.dismissal.kind == DismissalKind.RUN_OUT


def test_flags_accept_dismissal_string():
    delivery = delivery_from_flags(is_wicket=True, dismissal_kind="Caught", fielder="Point")
    assert delivery.dismissal.kind == DismissalKind.CAUGHT
    assert delivery.dismissal.fielder == "Point"


def test_pending_wicket_confirm_attaches_dismissal():
    pending = PendingWicket(delivery=NormalDelivery(runs=0), innings_index=0)
    delivery = pending.confirm("LBW")
    assert isinstance(delivery, NormalDelivery)
    assert delivery.dismissal.kind == DismissalKind.LBW


def test_pending_wicket_confirm_validates_combination():
    pending = PendingWicket(delivery=WideDelivery(), innings_index=0)
    with pytest.raises(ValidationError):
        pending.confirm(DismissalKind.CAUGHT, "Slip")
