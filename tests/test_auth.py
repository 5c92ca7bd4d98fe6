from jobfeed.auth import TOKEN_MAX_AGE_MS, bearer_token, check_password, make_token, validate_token

SECRET = "s3cret"
NOW = 1_714_555_800_000


def test_token_round_trip() -> None:
    token = make_token(SECRET, now_ms=NOW)
    assert token.startswith(f"{NOW}.")
    assert validate_token(token, SECRET, now_ms=NOW + 1000)


def test_token_rejected_with_other_secret() -> None:
    assert not validate_token(make_token(SECRET, now_ms=NOW), "other", now_ms=NOW)


def test_token_expires_after_thirty_days() -> None:
    token = make_token(SECRET, now_ms=NOW)
    assert validate_token(token, SECRET, now_ms=NOW + TOKEN_MAX_AGE_MS)
    assert not validate_token(token, SECRET, now_ms=NOW + TOKEN_MAX_AGE_MS + 1)


def test_malformed_tokens_rejected() -> None:
    for token in (None, "", "abc", "1.2.3", f"{NOW}.deadbeef", "notanumber.ÿ"):
        assert not validate_token(token, SECRET, now_ms=NOW)


def test_bearer_token_strips_prefix() -> None:
    assert bearer_token("Bearer abc.def") == "abc.def"
    assert bearer_token(None) == ""


def test_check_password() -> None:
    assert check_password("hunter2", "hunter2")
    assert not check_password("hunter3", "hunter2")
    assert not check_password(None, "hunter2")
    assert not check_password("", "")
