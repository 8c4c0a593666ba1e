"""
Catalog Statistics for POMO Editor

Handles translation progress and edit-state statistics.
"""

from data_model import EntryState


class CatalogStatistics:
    """Handles statistics calculation"""

    @staticmethod
    def calculate_statistics(entries):
        """Calculate progress statistics for a list of entries"""
        stats = {
            'total_entries': len(entries),
            'translated': 0,
            'untranslated': 0,
            'partially_translated': 0,  # Plural entries with some forms missing
            'fuzzy': 0,
            'plural': 0,
            'with_context': 0,
            'percent_translated': 0.0,
        }

        for entry in entries:
            if entry.is_plural:
                stats['plural'] += 1
            if entry.context is not None:
                stats['with_context'] += 1
            if entry.is_fuzzy:
                stats['fuzzy'] += 1

            if all(entry.translations):
                stats['translated'] += 1
            elif any(entry.translations):
                stats['partially_translated'] += 1
            else:
                stats['untranslated'] += 1

        if entries:
            stats['percent_translated'] = round(100.0 * stats['translated'] / len(entries), 1)
        return stats

    @staticmethod
    def calculate_session_statistics(session):
        """Progress of the resolved catalog plus per-state counts of the session"""
        stats = CatalogStatistics.calculate_statistics(session.resolve())
        stats['states'] = {state: 0 for state in EntryState.ALL}
        for _, state in session.entries():
            stats['states'][state] += 1
        stats['pending_changes'] = session.has_pending_changes
        return stats
