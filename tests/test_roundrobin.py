"""Tests for roundrobin.py: matchup generation and verification."""

from dhsched.models import Matchup
from dhsched.roundrobin import generate_matchups, verify_matchups


class TestGenerateMatchups:
    def test_count(self):
        for n in (2, 3, 4, 7, 12):
            assert len(generate_matchups(n)) == n * (n - 1)

    def test_no_self_matchups(self):
        assert all(m.home != m.away for m in generate_matchups(8))

    def test_every_ordered_pair_once(self):
        n = 6
        pairs = [(m.home, m.away) for m in generate_matchups(n)]
        assert len(set(pairs)) == len(pairs)
        expected = {(h, a) for h in range(1, n + 1)
                    for a in range(1, n + 1) if h != a}
        assert set(pairs) == expected

    def test_two_teams(self):
        assert generate_matchups(2) == [Matchup(1, 2), Matchup(2, 1)]

    def test_deterministic(self):
        assert generate_matchups(5) == generate_matchups(5)

    def test_games_per_team(self):
        result = verify_matchups(generate_matchups(12), 12)
        assert result["valid"], result["errors"]
        assert all(c == 22 for c in result["games_per_team"].values())


class TestVerifyMatchups:
    def test_missing_pair(self):
        matchups = generate_matchups(4)[1:]
        result = verify_matchups(matchups, 4)
        assert not result["valid"]
        assert any("1 hosting 2" in e for e in result["errors"])

    def test_duplicate_pair(self):
        matchups = generate_matchups(3) + [Matchup(1, 2)]
        result = verify_matchups(matchups, 3)
        assert not result["valid"]
        assert result["pair_counts"][(1, 2)] == 2

    def test_self_and_unknown(self):
        matchups = generate_matchups(3) + [Matchup(2, 2), Matchup(1, 9)]
        result = verify_matchups(matchups, 3)
        assert any("against itself" in e for e in result["errors"])
        assert any("unknown team" in e for e in result["errors"])
