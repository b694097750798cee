"""All-time-high reconciliation."""


def reconcile_ath(
    persisted: float | None,
    external: float | None,
    current: float,
) -> float:
    """Largest of the persisted maximum, the source's ATH and the current price.

    Missing and non-positive inputs are ignored; the current price always
    takes part.
    """
    candidates = [current]
    for value in (persisted, external):
        if value is not None and value > 0:
            candidates.append(value)
    return max(candidates)


def ath_source(persisted: float | None, external: float | None) -> str:
    """Label of the sources that took part in the reconciliation."""
    parts = []
    if persisted is not None and persisted > 0:
        parts.append("database")
    if external is not None and external > 0:
        parts.append("market")
    return "+".join(parts) or "current"
