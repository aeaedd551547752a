from tasteid.models.networks import ListeningSignature, MusicNetwork, NetworkChange, SignatureDrift
from tasteid.services.profile.constants import DRIFT_DEAD_BAND


def compare_signatures(current: ListeningSignature, previous: ListeningSignature) -> SignatureDrift:
    """
    Compare two snapshots of the same user's listening signature.

    Changes inside the dead band count as stable. Overall drift is half the
    total absolute change, capped at 1.
    """
    total_change = 0.0
    changes: list[NetworkChange] = []

    for network in MusicNetwork:
        change = current[network] - previous[network]
        total_change += abs(change)
        if change > DRIFT_DEAD_BAND:
            direction = "increased"
        elif change < -DRIFT_DEAD_BAND:
            direction = "decreased"
        else:
            direction = "stable"
        changes.append(NetworkChange(network=network, change=change, direction=direction))

    changes.sort(key=lambda c: -abs(c.change))
    return SignatureDrift(overall_drift=min(total_change / 2, 1.0), changes=changes)
