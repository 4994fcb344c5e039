"""Property-based and example tests for request validators."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from src.movieclub.schemas.auth import RegisterRequest
from src.movieclub.schemas.rating import RatingCreate
from src.movieclub.schemas.user import UserStatusUpdate

pytestmark = pytest.mark.unit

STRONG_PASSWORD = "correct-horse-battery-staple"


@given(score=st.integers(min_value=0, max_value=10))
def test_scores_in_range_accepted(score: int):
    assert RatingCreate(score=score).score == score


@given(score=st.one_of(st.integers(max_value=-1), st.integers(min_value=11)))
def test_scores_out_of_range_rejected(score: int):
    with pytest.raises(ValidationError) as exc_info:
        RatingCreate(score=score)
    assert any(error["loc"] == ("score",) for error in exc_info.value.errors())


@pytest.mark.parametrize("score", [7.5, "7", True, None])
def test_non_integer_scores_rejected(score):
    with pytest.raises(ValidationError):
        RatingCreate(score=score)


def test_score_is_required():
    with pytest.raises(ValidationError):
        RatingCreate.model_validate({"comment": "no score"})


@given(comment=st.text(alphabet=" \t\n", max_size=20))
def test_blank_comments_become_none(comment: str):
    assert RatingCreate(score=5, comment=comment).comment is None


def test_comment_is_trimmed():
    assert RatingCreate(score=5, comment="  great  ").comment == "great"


class TestRegisterRequest:
    def test_valid_registration(self):
        data = RegisterRequest(username="  cinephile ", email="a@example.com", password=STRONG_PASSWORD)

        assert data.username == "cinephile"

    @given(username=st.text(alphabet="abcdefghij", min_size=3, max_size=50))
    @settings(max_examples=50)
    def test_usernames_within_bounds_accepted(self, username: str):
        data = RegisterRequest(username=username, email="a@example.com", password=STRONG_PASSWORD)
        assert data.username == username

    @pytest.mark.parametrize("username", ["ab", "   ab   ", "x" * 51])
    def test_usernames_out_of_bounds_rejected(self, username: str):
        with pytest.raises(ValidationError) as exc_info:
            RegisterRequest(username=username, email="a@example.com", password=STRONG_PASSWORD)
        assert any(error["loc"] == ("username",) for error in exc_info.value.errors())

    @pytest.mark.parametrize("password", ["short", "password", "12345678", "aaaaaaaaaa"])
    def test_weak_passwords_rejected(self, password: str):
        with pytest.raises(ValidationError) as exc_info:
            RegisterRequest(username="cinephile", email="a@example.com", password=password)
        assert any(error["loc"] == ("password",) for error in exc_info.value.errors())

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            RegisterRequest(username="cinephile", email="not-an-email", password=STRONG_PASSWORD)


@pytest.mark.parametrize("status", ["active", "pending", "inactive"])
def test_status_update_accepts_known_statuses(status: str):
    assert UserStatusUpdate(status=status).status.value == status


def test_status_update_rejects_unknown_status():
    with pytest.raises(ValidationError):
        UserStatusUpdate(status="banned")
