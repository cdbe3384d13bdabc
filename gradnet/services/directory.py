from enum import Enum
from typing import Iterable, List, Optional, Union

from gradnet.schemas.profile import Profile

ALL = "all"


class MentorFilter(str, Enum):
    ALL = "all"
    MENTORS = "mentors"
    NON_MENTORS = "non-mentors"


def _year_selector(graduation_year: Union[int, str, None]) -> Optional[int]:
    # None means "all"
    if graduation_year is None or graduation_year == ALL or graduation_year == "":
        return None
    return int(graduation_year)


def _matches_term(profile: Profile, needle: str) -> bool:
    fields = (profile.full_name, profile.major, profile.current_company, profile.current_position)
    return any(needle in value.lower() for value in fields if value)


def filter_profiles(
    profiles: Iterable[Profile],
    viewer_id: str,
    term: str = "",
    graduation_year: Union[int, str, None] = ALL,
    mentor: MentorFilter = MentorFilter.ALL,
) -> List[Profile]:
    """
    Directory search. Drops the viewer's own profile and keeps profiles that
    match the search term (name, major, company or position), the graduation
    year and the mentor status. Input order is kept.
    """
    needle = (term or "").lower()
    year = _year_selector(graduation_year)
    mentor = MentorFilter(mentor)

    results = []
    for profile in profiles:
        if profile.id == viewer_id:
            continue
        if needle and not _matches_term(profile, needle):
            continue
        if year is not None and profile.graduation_year != year:
            continue
        if mentor == MentorFilter.MENTORS and not profile.is_mentor:
            continue
        if mentor == MentorFilter.NON_MENTORS and profile.is_mentor:
            continue
        results.append(profile)
    return results


def graduation_years(profiles: Iterable[Profile]) -> List[int]:
    """Distinct graduation years present in the directory, newest first."""
    return sorted({p.graduation_year for p in profiles if p.graduation_year is not None}, reverse=True)
