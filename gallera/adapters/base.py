"""Abstract base adapter for reading roster data files."""

from abc import ABC, abstractmethod


class BaseAdapter(ABC):
    @abstractmethod
    def parse(self, data_path: str):
        """Parse a data file and return its canonical in-memory form.

        ScanAdapter returns a scan dict with keys:
            is_new_team, team_info, roosters_per_front, front_groups

        RosterFileAdapter returns a RosterBook.
        """
        pass
