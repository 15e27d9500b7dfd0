"""
Tests for the command-line interface
"""

import json

import pytest
from nlpbridge.cli import main


class TestClassifyCommand:

    def test_json(self, capsys):
        code = main(['classify', '6', '--nlvb', '2', '--nlvbi', '1',
                     '--nlvc', '2', '--nlvo', '2', '--nbv', '1', '--niv', '1',
                     '--json'])
        assert code == 0
        tags = json.loads(capsys.readouterr().out)
        assert tags == ["Cont", "Int", "Cont", "Cont", "Bin", "Int"]

    def test_default_counts(self, capsys):
        assert main(['classify', '3', '--json']) == 0
        assert json.loads(capsys.readouterr().out) == ["Cont"] * 3

    def test_all_binary(self, capsys):
        assert main(['classify', '3', '--nbv', '3', '--json']) == 0
        assert json.loads(capsys.readouterr().out) == ["Bin"] * 3

    def test_inconsistent_counts(self, capsys):
        code = main(['classify', '2', '--nlvb', '3', '--nlvc', '3', '--nlvo', '3'])
        assert code == 1
        assert "Error" in capsys.readouterr().out


class TestSolveCommand:

    def test_json(self, capsys):
        code = main(['solve', 'equality-qp', '--solver', 'slsqp', '--json'])
        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data['problem']['name'] == 'equality-qp'
        assert data['problem']['lin'] == [0]
        assert data['problem']['counts']['nlvo'] == 2
        assert data['f'] == pytest.approx(0.5, abs=1e-6)
        assert data['counters']['neval_obj'] > 0

    def test_report(self, capsys):
        assert main(['solve', 'hs071', '--solver', 'ipopt']) == 0
        out = capsys.readouterr().out
        assert "RESULTS" in out
        assert "Optimal" in out

    def test_discrete_with_scipy(self, capsys):
        assert main(['solve', 'small-minlp']) == 1
        assert "continuous" in capsys.readouterr().out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
