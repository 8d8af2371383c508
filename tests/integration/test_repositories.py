"""
Integration tests for the SQLAlchemy repositories (in-memory SQLite).
"""

from datetime import timedelta

from lingua.core.card import IconModel
from lingua.core.exercise_type import ExerciseType
from lingua.core.streak import StreakModel
from lingua.core.words import VerbData
from lingua.db.repositories import CardRepository, SettingsRepository, StreakRepository


class TestCardRepository:
    """Tests for card persistence."""

    def test_save_and_get_round_trip(self, db_session, make_card, now):
        repo = CardRepository(db_session, "alice")
        card = make_card(
            "aufstehen",
            "to get up",
            icon=IconModel.from_iconify("mdi:alarm", "Material Design Icons"),
            tags=["morning"],
            examples=["Ich stehe früh auf."],
            word_data=VerbData(is_separable=True, separable_prefix="auf", auxiliary="sein"),
        ).with_exercise_result(ExerciseType.WRITING_TRANSLATION, True, now)

        repo.save(card)
        loaded = repo.get(card.id)

        assert loaded.front_text == "aufstehen"
        assert loaded.icon == card.icon
        assert loaded.tags == ("morning",)
        assert loaded.word_data == card.word_data
        assert loaded.next_review == card.next_review
        assert loaded.next_review.tzinfo is not None
        assert loaded.exercise_scores[ExerciseType.WRITING_TRANSLATION].current_streak == 1

    def test_save_updates_existing(self, db_session, make_card):
        repo = CardRepository(db_session, "alice")
        card = repo.save(make_card())

        repo.save(card.with_changes(back_text="hound", is_favorite=True))

        assert repo.count() == 1
        loaded = repo.get(card.id)
        assert loaded.back_text == "hound"
        assert loaded.is_favorite

    def test_users_are_isolated(self, db_session, make_card):
        alice = CardRepository(db_session, "alice")
        bob = CardRepository(db_session, "bob")
        card = alice.save(make_card())

        assert bob.get(card.id) is None
        assert bob.list() == []
        assert not bob.delete(card.id)
        assert alice.delete(card.id)

    def test_list_filters(self, db_session, make_card, now):
        repo = CardRepository(db_session, "alice")
        repo.save(make_card("Hund", "dog", now=now))
        repo.save(make_card("perro", "dog", language="es", now=now + timedelta(minutes=1)))
        repo.save(make_card("Katze", "cat", now=now + timedelta(minutes=2)).with_changes(is_archived=True))

        assert [c.front_text for c in repo.list()] == ["Katze", "perro", "Hund"]
        assert [c.front_text for c in repo.list(language="de")] == ["Katze", "Hund"]
        assert [c.front_text for c in repo.list(include_archived=False)] == ["perro", "Hund"]

    def test_due_cards(self, db_session, make_card, now):
        repo = CardRepository(db_session, "alice")
        fresh = repo.save(make_card("Hund", "dog"))
        later = repo.save(make_card("Katze", "cat").with_exercise_result(ExerciseType.WRITING_TRANSLATION, True, now))
        repo.save(make_card("Haus", "house").with_changes(is_archived=True))

        assert [c.id for c in repo.due_cards(now)] == [fresh.id]
        due_later = {c.id for c in repo.due_cards(now + timedelta(days=4))}
        assert due_later == {fresh.id, later.id}

    def test_search_and_aggregates(self, db_session, make_card):
        repo = CardRepository(db_session, "alice")
        repo.save(make_card("Hund", "dog", tags=["pets", "animals"]))
        repo.save(make_card("Katze", "cat", tags=["pets"]))
        repo.save(make_card("gato", "cat", language="es", category="animales"))

        assert {c.front_text for c in repo.search("CAT")} == {"Katze", "gato"}
        assert repo.counts_by_language() == {"de": 2, "es": 1}
        assert repo.categories() == ["animales", "animals"]
        assert repo.tags() == ["pets", "animals"]

    def test_clear(self, db_session, make_card):
        repo = CardRepository(db_session, "alice")
        repo.save_many([make_card("Hund", "dog"), make_card("Katze", "cat")])

        assert repo.clear() == 2
        assert repo.count() == 0


class TestStreakRepository:
    def test_load_defaults_to_initial(self, db_session):
        assert StreakRepository(db_session, "alice").load() == StreakModel.initial()

    def test_save_and_reset(self, db_session, now):
        repo = StreakRepository(db_session, "alice")
        streak = StreakModel.initial().update_with_review(12, now)
        repo.save(streak)

        assert repo.load() == streak
        reset = repo.reset()
        assert reset.current_streak == 0
        assert repo.load().total_cards_reviewed == 12

    def test_clear(self, db_session, now):
        repo = StreakRepository(db_session, "alice")
        repo.save(StreakModel.initial().update_with_review(1, now))
        repo.clear()

        assert repo.load() == StreakModel.initial()


class TestSettingsRepository:
    def test_json_values(self, db_session):
        repo = SettingsRepository(db_session, "alice")

        assert repo.get_json("theme", "light") == "light"
        repo.set_json("theme", {"mode": "dark"})
        repo.set_json("theme", {"mode": "sepia"})

        assert repo.get_json("theme") == {"mode": "sepia"}
        assert SettingsRepository(db_session, "bob").get_json("theme") is None
        assert repo.delete("theme")
        assert not repo.delete("theme")
