"""
Сквозные тесты CLI на бэкенде с разделяемой памятью.
"""

from collections import Counter

import pytest

from spmd_kmeans.main import build_parser, main


class TestCLI:
    def test_separated_scenario(self, write_numbers, separated_dataset, capsys):
        path = write_numbers(separated_dataset)

        code = main(["--input", str(path), "--workers", "4", "--clusters", "4"])

        assert code == 0
        out = capsys.readouterr().out.strip().splitlines()
        assert out == ["[10.0] 10", "[20.0] 20", "[200.0] 200", "[210.0] 210"]

    def test_only_first_w_bytes_are_used(self, write_numbers, two_groups_dataset, capsys):
        path = write_numbers(two_groups_dataset + [255, 255])

        code = main(["--input", str(path), "--workers", "6", "--clusters", "2", "--layout", "split"])

        assert code == 0
        out = capsys.readouterr().out.strip().splitlines()
        assert out == ["[15.0] 0, 10, 20, 30", "[105.0] 100, 110"]

    def test_report_conserves_observations(self, write_numbers, rng, capsys):
        values = rng.integers(0, 256, size=6).tolist()
        path = write_numbers(values)

        code = main(["--input", str(path), "--workers", "6", "--clusters", "3", "--epsilon", "0.1"])

        assert code == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 3
        members = []
        for line in lines:
            _, _, tail = line.partition("]")
            members += [int(v) for v in tail.split(",") if v.strip()]
        assert Counter(members) == Counter(values)

    def test_seeds_from_dataset_when_fewer_workers_than_clusters(self, write_numbers, capsys):
        path = write_numbers([10, 20, 200, 210, 1, 2, 3, 4, 5, 6])

        code = main(["--input", str(path), "--workers", "2", "--clusters", "4"])

        assert code == 0
        out = capsys.readouterr().out.strip().splitlines()
        # стартовые центроиды из первых K байтов, раздаются и попадают в отчёт первые W
        assert out == ["[10.0] 10", "[20.0] 20", "[200.0]", "[210.0]"]

    def test_too_few_observations(self, write_numbers, capsys):
        path = write_numbers([1, 2, 3, 4, 5, 6, 7, 8])

        code = main(["--input", str(path), "--workers", "9"])

        assert code == 1
        assert capsys.readouterr().out == ""

    def test_missing_input(self, tmp_path):
        assert main(["--input", str(tmp_path / "absent"), "--workers", "2", "--clusters", "2"]) == 1

    def test_invalid_config_is_usage_error(self):
        with pytest.raises(SystemExit) as info:
            main(["--clusters", "0", "--workers", "2"])
        assert info.value.code == 2


def test_parser_defaults():
    args = build_parser().parse_args([])

    assert args.input == "numbers"
    assert args.clusters == 4
    assert args.epsilon == 0.01
    assert args.max_rounds is None
    assert args.layout == "inline"
    assert args.backend == "shared"
