from quizroom.models import Exact, OneOf, Participant, Question
from quizroom.services.rooms.scoring import award, is_correct


def test_exact_match_ignores_case_and_whitespace():
    q = Question(Exact('Paris'))
    assert is_correct(q, 'paris')
    assert is_correct(q, '  PARIS  ')
    assert not is_correct(q, 'Lyon')
    assert not is_correct(q, None)


def test_one_of_matches_any_candidate():
    q = Question(OneOf([' Nether', 'The Nether ']))
    assert is_correct(q, 'nether')
    assert is_correct(q, 'the nether')
    assert not is_correct(q, 'End')


def test_award_adds_point_value_once():
    p = Participant('alice')
    q = Question(Exact('Paris'), point_value=15)
    assert award(p, q, 'paris') is True
    assert p.score == 15


def test_award_never_deducts():
    p = Participant('bob', score=30)
    assert award(p, Question(Exact('Paris')), 'Lyon') is False
    assert p.score == 30
