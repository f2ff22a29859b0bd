from backend.analysis.location import (
    UNKNOWN,
    geolocation_decision,
    match_claim,
    normalize_location,
    predict_location,
)


def test_normalize_location_strips_punctuation_and_collapses_whitespace() -> None:
    assert normalize_location("  Paris,   FRANCE!! ") == "paris france"
    assert normalize_location("Kahramanmaras / Turkey") == "kahramanmaras turkey"
    assert normalize_location(None) == ""


def test_predict_location_uses_filename_triggers() -> None:
    assert predict_location("IMG_eiffel_night.jpg").location == "Paris, France"
    assert predict_location("quake_turkey_aerial.png").event == "earthquake"
    assert predict_location("case_33001.png").location == "Kanchipuram District, Tamil Nadu, India"


def test_predict_location_unknown_when_no_trigger() -> None:
    prediction = predict_location("holiday.jpg")
    assert prediction.location == UNKNOWN
    assert prediction.event == UNKNOWN
    assert prediction.confidence == 0.35
    assert not prediction.is_known


def test_match_claim_unknown_prediction_is_insufficient_even_with_claim() -> None:
    match = match_claim(predict_location("holiday.jpg"), "Paris")
    assert match.status == "insufficient"
    assert match.risk_score == 55
    assert match.message == "Cannot confirm location; insufficient cues."


def test_match_claim_missing_claim_asks_for_location() -> None:
    match = match_claim(predict_location("paris_31001.jpg"), "  ?! ")
    assert match.status == "insufficient"
    assert match.risk_score == 50
    assert match.message == "Provide a claimed location to verify."


def test_match_claim_accepts_partial_location_tokens() -> None:
    kanchipuram = predict_location("flood_kanchipuram.png")
    assert match_claim(kanchipuram, "Tamil Nadu").status == "match"
    assert match_claim(kanchipuram, "somewhere in INDIA").status == "match"

    paris = predict_location("eiffel.jpg")
    match = match_claim(paris, "Paris")
    assert match.status == "match"
    assert match.risk_score == 12


def test_match_claim_mismatch_when_no_token_overlaps() -> None:
    match = match_claim(predict_location("turkey_32001.jpg"), "Aleppo, Syria")
    assert match.status == "mismatch"
    assert match.risk_score == 85
    assert match.message == "Claim mismatch: Not consistent with predicted location."


def test_geolocation_decision_follows_match_status() -> None:
    assert geolocation_decision("match") == "APPROVE"
    assert geolocation_decision("mismatch") == "REJECT"
    assert geolocation_decision("insufficient") == "MANUAL_REVIEW"
