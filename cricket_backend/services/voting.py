"""Captain voting result tallies."""


def max_votes(captains):
    """Largest vote count, floored at 1 so progress normalization never divides by zero."""
    return max([captain.votes or 0 for captain in captains] + [1])


def total_votes(captains):
    return sum(captain.votes or 0 for captain in captains)


def summarize_results(captains):
    """Build the ranked results payload.

    ``captains`` must already be ordered by votes descending; ties keep whatever
    order the query produced.
    """
    ceiling = max_votes(captains)
    rows = []
    for index, captain in enumerate(captains):
        data = captain.to_dict()
        data['rank'] = index + 1
        data['is_leader'] = index == 0
        data['progress'] = round((captain.votes or 0) / ceiling * 100, 2)
        rows.append(data)
    return {
        'captains': rows,
        'max_votes': ceiling,
        'total_votes': total_votes(captains),
    }
