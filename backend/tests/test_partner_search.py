import json

from partner_match.core.config import Settings
from partner_match.schemas.partners import PartnerFilters
from partner_match.services.partner_search import PartnerSearchSession, apply_filters, rank_candidates, search
from partner_match.services.profile_normalizer import resolve_profile_record

from conftest import FakeSource


def _ids(partners):
    return [p.id for p in partners]


CANDIDATES = [
    {"id": "c1", "displayName": "Elif", "danceStyles": ["salsa"]},
    {"id": "c2", "displayName": "Mehmet", "danceStyles": ["SALSA"]},
    {"id": "c3", "displayName": "Zeynep", "availableTimes": ["Akşam"]},
]


def test_equal_scores_keep_fetch_order(style_dictionary, requester_record):
    source = FakeSource(candidates=CANDIDATES, profiles={"me": requester_record})
    result = search(source, "me", None, style_dictionary)

    assert _ids(result.partners) == ["c1", "c2", "c3"]
    assert [p.relevance_score for p in result.partners] == [20, 20, 5]
    assert result.error is None


def test_higher_scores_move_up(style_dictionary, requester_record):
    candidates = [CANDIDATES[2], CANDIDATES[0], CANDIDATES[1]]
    source = FakeSource(candidates=candidates, profiles={"me": requester_record})

    result = search(source, "me", None, style_dictionary)

    assert _ids(result.partners) == ["c1", "c2", "c3"]


def test_requester_is_excluded(style_dictionary, requester_record):
    candidates = CANDIDATES + [dict(requester_record)]
    source = FakeSource(candidates=candidates, profiles={"me": requester_record})

    result = search(source, "me", None, style_dictionary)

    assert "me" not in _ids(result.partners)
    assert len(result.partners) == 3


def test_anonymous_search_keeps_store_order(style_dictionary):
    source = FakeSource(candidates=CANDIDATES)
    result = search(source, None, None, style_dictionary)

    assert _ids(result.partners) == ["c1", "c2", "c3"]
    assert all(p.relevance_score == 0 for p in result.partners)
    assert "profile" not in source.calls


def test_unknown_requester_ranks_anonymously(style_dictionary):
    source = FakeSource(candidates=CANDIDATES)
    result = search(source, "ghost", None, style_dictionary)

    assert result.error is None
    assert all(p.relevance_score == 0 for p in result.partners)


def test_candidate_fetch_failure_gives_empty_list_and_error(style_dictionary):
    source = FakeSource(fail_candidates=True)
    result = search(source, "me", None, style_dictionary)

    assert result.partners == []
    assert result.has_error
    assert result.error == "candidates unavailable"
    assert "profile" not in source.calls


def test_profile_fetch_failure_ranks_anonymously_with_error(style_dictionary):
    source = FakeSource(candidates=CANDIDATES, fail_profile=True)
    result = search(source, "me", None, style_dictionary)

    assert _ids(result.partners) == ["c1", "c2", "c3"]
    assert all(p.relevance_score == 0 for p in result.partners)
    assert result.error == "profile unavailable"


def test_only_one_page_is_ranked(style_dictionary):
    candidates = [{"id": f"u{i}", "displayName": f"User {i}"} for i in range(5)]
    source = FakeSource(candidates=candidates)
    config = Settings(candidate_page_size=3)

    result = search(source, None, None, style_dictionary, config=config)

    assert source.limits == [3]
    assert _ids(result.ranked) == ["u0", "u1", "u2"]


def test_filters_do_not_change_ranking(style_dictionary, requester_record):
    source = FakeSource(candidates=CANDIDATES, profiles={"me": requester_record})
    result = search(source, "me", PartnerFilters(style="salsa"), style_dictionary)

    assert _ids(result.partners) == ["c1", "c2"]
    assert _ids(result.ranked) == ["c1", "c2", "c3"]


def _ranked(style_dictionary):
    records = [
        {"id": "a", "displayName": "Elif Yılmaz", "gender": "Kadın", "level": "intermediate",
         "danceStyles": ["salsa", "bachata"], "city": "İstanbul, Kadıköy", "availableTimes": ["Akşam"]},
        {"id": "b", "displayName": "Mehmet Kaya", "gender": "Erkek", "level": "advanced",
         "danceStyles": ["tango"], "city": "İstanbul, Beşiktaş", "availableTimes": ["Hafta Sonu"]},
        {"id": "c", "displayName": "Ayşe Öztürk", "gender": "Kadın", "level": "beginner",
         "danceStyles": ["modern-dans"], "city": "İzmir", "availableTimes": ["Sabah", "Akşam"]},
    ]
    return rank_candidates(records, None, style_dictionary)


def test_text_search_is_case_insensitive(style_dictionary):
    partners = _ranked(style_dictionary)
    assert _ids(apply_filters(partners, PartnerFilters(query="  kaya "))) == ["b"]


def test_style_filter_accepts_any_style_key(style_dictionary):
    partners = _ranked(style_dictionary)
    assert _ids(apply_filters(partners, PartnerFilters(style="modern_dance"), style_dictionary)) == ["c"]
    assert _ids(apply_filters(partners, PartnerFilters(style="Arjantin Tango"), style_dictionary)) == ["b"]


def test_gender_level_city_and_time_filters(style_dictionary):
    partners = _ranked(style_dictionary)
    assert _ids(apply_filters(partners, PartnerFilters(gender="Kadın"))) == ["a", "c"]
    assert _ids(apply_filters(partners, PartnerFilters(level="İleri"))) == ["b"]
    assert _ids(apply_filters(partners, PartnerFilters(level="beginner"))) == ["c"]
    assert _ids(apply_filters(partners, PartnerFilters(city="İstanbul"))) == ["a", "b"]
    assert _ids(apply_filters(partners, PartnerFilters(available_times=["Akşam"]))) == ["a", "c"]


def test_filters_combine(style_dictionary):
    partners = _ranked(style_dictionary)
    filters = PartnerFilters(gender="Kadın", available_times=["Akşam"], city="İstanbul")
    assert _ids(apply_filters(partners, filters)) == ["a"]


def test_filters_are_idempotent(style_dictionary):
    partners = _ranked(style_dictionary)
    filters = PartnerFilters(gender="Kadın")
    once = apply_filters(partners, filters)
    assert apply_filters(once, filters) == once


def test_empty_filters_pass_everything(style_dictionary):
    partners = _ranked(style_dictionary)
    assert apply_filters(partners, PartnerFilters()) == partners
    assert apply_filters(partners, PartnerFilters(query="", style=" ")) == partners
    assert apply_filters(partners, None) == partners


def test_rank_candidates_scores_against_requester(style_dictionary, requester_record):
    requester = resolve_profile_record(requester_record)
    ranked = rank_candidates(CANDIDATES, requester, style_dictionary, requester_id="me")
    assert [p.relevance_score for p in ranked] == [20, 20, 5]


def test_session_builds_dictionary_once(requester_record):
    source = FakeSource(candidates=CANDIDATES, profiles={"me": requester_record})
    session = PartnerSearchSession(source, "me")

    session.run()
    session.run(PartnerFilters(query="elif"))

    assert source.calls.count("styles") == 1
    assert source.calls.count("candidates") == 2


def test_session_refine_does_not_fetch(requester_record):
    source = FakeSource(candidates=CANDIDATES, profiles={"me": requester_record})
    session = PartnerSearchSession(source, "me")

    first = session.run()
    calls_before = list(source.calls)
    refined = session.refine(PartnerFilters(query="zeynep"))

    assert source.calls == calls_before
    assert _ids(refined.partners) == ["c3"]
    assert refined.ranked == first.ranked


def test_session_surfaces_style_failure(requester_record):
    source = FakeSource(candidates=CANDIDATES, profiles={"me": requester_record}, fail_styles=True)
    session = PartnerSearchSession(source, "me")

    result = session.run()

    assert result.error == "styles unavailable"
    # Without a dictionary styles stay as typed, so "salsa" no longer matches "Salsa".
    assert _ids(result.partners) == ["c3", "c1", "c2"]


def test_non_finite_age_does_not_break_search(style_dictionary):
    candidates = [json.loads('{"id": "u1", "age": NaN}'), {"id": "u2", "age": 31}]
    source = FakeSource(candidates=candidates)

    result = search(source, None, None, style_dictionary)

    assert result.error is None
    assert _ids(result.partners) == ["u1", "u2"]
    assert [p.age for p in result.partners] == [0, 31]
