from camp_engine.filtering import CampFilterCriteria, filter_camps
from camp_engine.notifications import has_local_notification, match_local_camps

from camp_factories import NOW, ZONE, make_camp


def test_locality_match_is_case_insensitive_exact() -> None:
    camps = [
        make_camp("One", location="Chennai", days=1),
        make_camp("Two", location="chennai", days=2),
        make_camp("Three", location="Madurai", days=1),
        make_camp("Four", location="North Chennai", days=1),
    ]
    matched = match_local_camps(camps, "Chennai", now=NOW, zone=ZONE)
    assert [camp.health_camp_name for camp in matched] == ["One", "Two"]


def test_past_camps_never_notify() -> None:
    camps = [make_camp("Old", location="Chennai", days=-1)]
    assert match_local_camps(camps, "Chennai", now=NOW, zone=ZONE) == []
    assert has_local_notification(camps, "Chennai", now=NOW, zone=ZONE) is False


def test_unknown_locality_returns_nothing() -> None:
    camps = [make_camp("One", location="Chennai")]
    assert match_local_camps(camps, "", now=NOW, zone=ZONE) == []
    assert match_local_camps(camps, None, now=NOW, zone=ZONE) == []


def test_matcher_ignores_listing_filters() -> None:
    camps = [make_camp("Eye Camp", location="Chennai"), make_camp("Dental Camp", location="Chennai")]
    visible = filter_camps(camps, CampFilterCriteria(search_query="eye"), now=NOW, zone=ZONE)

    assert len(visible) == 1
    assert len(match_local_camps(camps, "CHENNAI", now=NOW, zone=ZONE)) == 2
    assert has_local_notification(camps, "chennai", now=NOW, zone=ZONE) is True
