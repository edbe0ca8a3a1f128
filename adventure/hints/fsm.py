from __future__ import annotations

from enum import StrEnum

from statemachine import State, StateMachine


class HintPhase(StrEnum):
    closed = "closed"
    listing = "listing"
    revealing = "revealing"
    ready = "ready"
    exhausted = "exhausted"


class HintFSM(StateMachine):
    """Phases of the hint disclosure view.

    closed -> listing (open) -> revealing (select) -> ready (countdown elapsed)
    -> revealing (advance) | exhausted (no further level). `back` returns to
    listing and `close` to closed from anywhere. The disclosure engine owns the
    countdown; the FSM only guards which events are legal.
    """

    closed = State(HintPhase.closed.value, value=HintPhase.closed.value, initial=True)
    listing = State(HintPhase.listing.value, value=HintPhase.listing.value)
    revealing = State(HintPhase.revealing.value, value=HintPhase.revealing.value)
    ready = State(HintPhase.ready.value, value=HintPhase.ready.value)
    exhausted = State(HintPhase.exhausted.value, value=HintPhase.exhausted.value)

    open = (
        closed.to(listing)
        | listing.to.itself()
        | revealing.to(listing)
        | ready.to(listing)
        | exhausted.to(listing)
    )
    select = listing.to(revealing) | revealing.to.itself() | ready.to(revealing) | exhausted.to(revealing)
    elapse = revealing.to(ready)
    advance = ready.to(revealing)
    exhaust = ready.to(exhausted)
    back = listing.to.itself() | revealing.to(listing) | ready.to(listing) | exhausted.to(listing)
    close = (
        closed.to.itself()
        | listing.to(closed)
        | revealing.to(closed)
        | ready.to(closed)
        | exhausted.to(closed)
    )

    @property
    def phase(self) -> HintPhase:
        return HintPhase(str(self.current_state.value))
