"""Integration tests for the database layer.

These tests verify:
- Model relationships and cascade deletes
- The SQL-backed stats repository, including survey scoping of answers
- Survey, response and user services against a real (SQLite) database
"""

import uuid

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.models import Answer, Question, Survey, SurveyResponse
from app.schemas.survey import ResponseSubmit, SurveyCreate, SurveyUpdate
from app.services.responses import ResponseService
from app.services.stats import SqlStatsRepository, StatsService
from app.services.surveys import SurveyService
from app.services.users import UserService
from app.schemas.user import RegisterRequest


class TestModels:
    """Tests for ORM relationships."""

    def test_questions_load_in_order_index_order(self, db_session, make_survey):
        survey = make_survey([("text", "Last", 2), ("text", "First", 0), ("text", "Middle", 1)])
        db_session.expire_all()

        loaded = db_session.get(Survey, survey.id)

        assert [q.question for q in loaded.questions] == ["First", "Middle", "Last"]

    def test_answer_json_round_trip(self, db_session, make_survey, make_response):
        survey = make_survey([("multiple-choice", "Pick"), ("rating", "Rate")])
        pick, rate = survey.questions
        make_response(survey, {pick: ["A", "B"], rate: 4})
        db_session.expire_all()

        values = dict(db_session.execute(select(Answer.question_id, Answer.answer)).all())

        assert values == {pick.id: ["A", "B"], rate.id: 4}

    def test_deleting_survey_cascades(self, db_session, make_survey, make_response):
        survey = make_survey([("yes-no", "Ok?")])
        make_response(survey, {survey.questions[0]: "yes"})

        db_session.delete(survey)
        db_session.commit()

        assert db_session.execute(select(Question)).first() is None
        assert db_session.execute(select(SurveyResponse)).first() is None
        assert db_session.execute(select(Answer)).first() is None

    def test_answer_requires_existing_question(self, db_session, make_survey):
        survey = make_survey([("text", "Why?")])
        response = SurveyResponse(survey_id=survey.id, respondent_name="Sam")
        response.answers.append(Answer(question_id=str(uuid.uuid4()), answer="x"))
        db_session.add(response)

        with pytest.raises(IntegrityError):
            db_session.commit()


class TestSqlStatsRepository:
    """Tests for the SQLAlchemy stats repository."""

    def test_count_responses_counts_records(self, db_session, make_survey, make_response):
        survey = make_survey([("text", "Why?"), ("yes-no", "Ok?")])
        why, ok = survey.questions
        make_response(survey, {why: "Because", ok: "yes"})
        make_response(survey, {})

        assert SqlStatsRepository(db_session).count_responses(survey.id) == 2

    def test_list_questions_is_ordered(self, db_session, make_survey):
        survey = make_survey([("rating", "B", 1), ("text", "A", 0)])

        questions = SqlStatsRepository(db_session).list_questions(survey.id)

        assert [(q.text, q.type, q.order_index) for q in questions] == [
            ("A", "text", 0),
            ("B", "rating", 1),
        ]

    def test_answers_are_scoped_to_survey(self, db_session, make_survey, make_response):
        """An answer filed under another survey's response is ignored."""
        survey = make_survey([("single-choice", "Colour?")])
        other = make_survey([("text", "Other")], title="Other survey")
        question = survey.questions[0]
        make_response(survey, {question: "Red"})
        make_response(other, {question: "Blue"})

        answers = SqlStatsRepository(db_session).list_answers_for_question(question.id, survey.id)

        assert answers == ["Red"]


class TestStatsEndToEnd:
    """StatsService against the database."""

    def test_full_report(self, db_session, make_survey, make_response):
        survey = make_survey([
            ("rating", "Rate us"),
            ("single-choice", "Colour"),
            ("multiple-choice", "Toppings"),
            ("text", "Comments"),
            ("yes-no", "Again?"),
        ])
        rate, colour, toppings, comments, again = survey.questions
        make_response(survey, {rate: 3, colour: "Red", toppings: ["A", "B"], comments: "Nice"})
        make_response(survey, {rate: "4", colour: "", toppings: ["B"], again: "yes"})
        make_response(survey, {rate: "bad", colour: "Red"})
        make_response(survey, {rate: 5, colour: "Blue"})

        stats = StatsService.for_session(db_session).get_survey_stats(survey.id)

        assert stats.total_responses == 4
        by_text = {s.question: s for s in stats.question_stats}
        assert [s.question for s in stats.question_stats] == [
            "Rate us", "Colour", "Toppings", "Comments", "Again?",
        ]
        assert by_text["Rate us"].responses == {"3": 1, "4": 1, "5": 1}
        assert by_text["Rate us"].average_rating == 4
        assert by_text["Colour"].responses == {"Red": 2, "Blue": 1}
        assert by_text["Toppings"].responses == {"A": 1, "B": 2}
        assert by_text["Comments"].responses == {}
        assert by_text["Again?"].responses == {"yes": 1}
        assert by_text["Again?"].average_rating is None

    def test_unknown_survey_is_empty(self, db_session):
        stats = StatsService.for_session(db_session).get_survey_stats(str(uuid.uuid4()))

        assert stats.total_responses == 0
        assert stats.question_stats == []


class TestSurveyService:
    """Tests for SurveyService."""

    def payload(self, **overrides):
        data = {
            "title": "Feedback",
            "questions": [
                {"type": "rating", "question": "Rate", "minRating": 1, "maxRating": 5},
                {"type": "single-choice", "question": "Pick", "options": ["A", "B"]},
                {"type": "text", "question": "Why", "options": []},
            ],
        }
        data.update(overrides)
        return SurveyCreate.model_validate(data)

    def test_create_assigns_order_and_options(self, db_session):
        survey = SurveyService(db_session).create(self.payload())

        assert [q.order_index for q in survey.questions] == [0, 1, 2]
        assert survey.questions[0].min_rating == 1
        assert survey.questions[1].options == ["A", "B"]
        assert survey.questions[2].options is None

    def test_list_published_excludes_drafts(self, db_session):
        service = SurveyService(db_session)
        service.create(self.payload(title="Public"))
        service.create(self.payload(title="Draft", isPublished=False))

        assert [s.title for s in service.list_published()] == ["Public"]

    def test_get_with_malformed_id_returns_none(self, db_session):
        assert SurveyService(db_session).get("not-a-uuid") is None

    def test_update_replaces_questions(self, db_session):
        service = SurveyService(db_session)
        survey = service.create(self.payload())

        updated = service.update(survey.id, SurveyUpdate.model_validate({
            "title": "Renamed",
            "questions": [{"type": "yes-no", "question": "Only one"}],
        }))

        assert updated.title == "Renamed"
        assert [(q.type, q.question, q.order_index) for q in updated.questions] == [
            ("yes-no", "Only one", 0),
        ]
        assert len(db_session.execute(select(Question)).all()) == 1

    def test_update_without_questions_keeps_them(self, db_session):
        service = SurveyService(db_session)
        survey = service.create(self.payload())

        updated = service.update(survey.id, SurveyUpdate.model_validate({"isPublished": False}))

        assert updated.is_published is False
        assert len(updated.questions) == 3

    def test_update_missing_survey(self, db_session):
        update = SurveyUpdate.model_validate({"title": "x"})

        assert SurveyService(db_session).update(str(uuid.uuid4()), update) is None

    def test_delete(self, db_session):
        service = SurveyService(db_session)
        survey = service.create(self.payload())

        assert service.delete(survey.id) is True
        assert service.delete(survey.id) is False


class TestResponseService:
    """Tests for ResponseService."""

    def test_submit_and_list(self, db_session, make_survey):
        survey = make_survey([("text", "Why"), ("rating", "Rate")])
        why, rate = survey.questions
        service = ResponseService(db_session)

        response = service.submit(ResponseSubmit.model_validate({
            "surveyId": survey.id,
            "answers": [
                {"questionId": rate.id, "answer": 5},
                {"questionId": why.id, "answer": "Because"},
            ],
            "respondentName": "Sam",
            "respondentEmail": "",
            "respondentAge": 30,
        }))

        assert response.respondent_email is None
        assert [a.question_id for a in response.answers] == [why.id, rate.id]

        listed = service.list_for_survey(survey.id)
        assert [r.id for r in listed] == [response.id]
        assert service.count_for_survey(survey.id) == 1

    def test_submit_for_unknown_survey_fails(self, db_session):
        submission = ResponseSubmit.model_validate({
            "surveyId": str(uuid.uuid4()),
            "answers": [{"questionId": str(uuid.uuid4()), "answer": "x"}],
            "respondentName": "Sam",
        })

        with pytest.raises(IntegrityError):
            ResponseService(db_session).submit(submission)


class TestUserService:
    """Tests for UserService."""

    def test_create_hashes_password(self, db_session):
        user = UserService(db_session).create(RegisterRequest.model_validate({
            "username": "alice", "email": "alice@surveys.io", "password": "secret123",
        }))

        assert user.password != "secret123"

    def test_authenticate_by_username_or_email(self, db_session, make_user):
        make_user()
        service = UserService(db_session)

        assert service.authenticate("alice", "secret123") is not None
        assert service.authenticate("alice@surveys.io", "secret123") is not None
        assert service.authenticate("alice", "wrong") is None
        assert service.authenticate("bob", "secret123") is None

    def test_get_stats(self, db_session, make_user, make_survey, make_response):
        alice = make_user()
        bob = make_user(username="bob", email="bob@surveys.io")
        mine = make_survey([("yes-no", "Ok?")], title="Mine", user_id=alice.id)
        theirs = make_survey([("yes-no", "Fine?")], title="Theirs", user_id=bob.id)
        make_response(mine, {mine.questions[0]: "yes"}, user_id=bob.id)
        make_response(mine, {mine.questions[0]: "no"})
        make_response(theirs, {theirs.questions[0]: "yes"}, user_id=alice.id)
        make_response(theirs, {theirs.questions[0]: "no"}, user_id=alice.id)

        stats = UserService(db_session).get_stats(alice.id)

        assert stats.total_surveys_created == 1
        assert stats.total_responses_submitted == 2
        assert [(s.title, s.total_responses) for s in stats.surveys_created] == [("Mine", 2)]
        assert [(s.survey_id, s.survey_title) for s in stats.surveys_answered] == [
            (theirs.id, "Theirs"),
        ]
