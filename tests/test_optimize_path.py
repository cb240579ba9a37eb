import json
import os

import numpy as np
import pandas as pd
import pytest

from optimize_path import run, run_from_config, build_parser, config_from_args, method_name
from optimize_batch import run_batch
from path_data import read_points
import plot_reductions


CROSSING = "P0,0,0,0\nP2,10,10,0\nP1,0,10,0\nP3,10,0,0\n"


@pytest.fixture
def crossing_file(tmp_path):
    p = tmp_path / "crossing.csv"
    p.write_text(CROSSING, encoding="utf-8")
    return str(p)


def test_run_writes_reordered_file(tmp_path, crossing_file, capsys):
    out = str(tmp_path / "ordered.csv")
    summary = run(crossing_file, out, construct='identity')
    assert summary['initial_length'] == pytest.approx(20 * np.sqrt(2) + 10)
    assert summary['optimized_length'] == pytest.approx(30.0)
    assert summary['method'] == 'Input order+2opt'
    assert read_points(out)['labels'] == ['P0', 'P1', 'P2', 'P3']
    printed = capsys.readouterr().out
    assert "Initial path length = 38.2843" in printed
    assert "Optimized path length = 30" in printed


def test_run_raw_lines(tmp_path):
    src = tmp_path / "scan.txt"
    src.write_text("0 0\n10 10\n0 10\n10 0\n", encoding="utf-8")
    out = str(tmp_path / "scan_out.txt")
    run(str(src), out, dim=2, construct='identity', raw_lines=True)
    assert (tmp_path / "scan_out.txt").read_text(encoding="utf-8") == "0 0\n0 10\n10 10\n10 0\n"


def test_run_missing_and_empty_input(tmp_path):
    with pytest.raises(SystemExit):
        run(str(tmp_path / "nope.csv"), str(tmp_path / "o.csv"))
    empty = tmp_path / "empty.csv"
    empty.write_text("label,X,Y,Z\n", encoding="utf-8")
    with pytest.raises(SystemExit):
        run(str(empty), str(tmp_path / "o.csv"))


def test_run_save_json_and_plots(tmp_path, crossing_file):
    out_dir = str(tmp_path / "runs")
    summary = run(crossing_file, str(tmp_path / "o.csv"), save_json=True, plot=True,
                  out_dir=out_dir, tag='t')
    run_dir = os.path.join(out_dir, "t_crossing")
    assert summary['run_dir'] == run_dir
    df = pd.read_csv(os.path.join(run_dir, "results.csv"))
    assert df['method'].tolist() == ['Input order', 'NN+2opt']
    with open(os.path.join(run_dir, "solution.json"), encoding="utf-8") as f:
        sol = json.load(f)
    assert sorted(sol['order']) == [0, 1, 2, 3]
    assert sol['optimized_length'] == pytest.approx(30.0)
    assert len(summary['plots']) == 3
    for png in summary['plots']:
        assert os.path.exists(png)


def test_run_from_config_defaults(tmp_path, crossing_file):
    summary = run_from_config({'input': crossing_file, 'output': str(tmp_path / "o.csv"),
                               'refine': False})
    assert summary['method'] == 'NN'
    assert summary['passes'] == 0


def test_cli_flags_override_config(tmp_path, crossing_file):
    cfg_path = tmp_path / "cfg.json"
    cfg_path.write_text(json.dumps({'mode': 'xy', 'construct': 'identity', 'tag': 'cfg'}),
                        encoding="utf-8")
    args = build_parser().parse_args([crossing_file, "out.csv", "--config", str(cfg_path),
                                      "--construct", "nn", "--no_refine"])
    cfg = config_from_args(args)
    assert cfg['mode'] == 'xy'
    assert cfg['construct'] == 'nn'
    assert cfg['refine'] is False
    assert cfg['tag'] == 'cfg'
    assert 'config' not in cfg and 'plot' not in cfg


def test_method_name():
    assert method_name('nn', True) == 'NN+2opt'
    assert method_name('identity', False) == 'Input order'


def test_batch_and_aggregate(tmp_path, crossing_file):
    other = tmp_path / "square.csv"
    other.write_text("A,0,0,0\nB,10,0,0\nC,10,10,0\nD,0,10,0\n", encoding="utf-8")
    out_dir = str(tmp_path / "runs")
    df = run_batch([crossing_file, str(other)], out_dir=out_dir)
    assert len(df) == 2
    assert os.path.exists(os.path.join(out_dir, "summary.csv"))
    assert df['optimized_length'].tolist() == pytest.approx([30.0, 30.0])

    png = str(tmp_path / "agg.png")
    by_method = plot_reductions.main(os.path.join(out_dir, "summary.csv"), png)
    assert os.path.exists(png)
    assert by_method.loc['NN+2opt', 'count'] == 2
    assert by_method.loc['NN+2opt', 'min'] == pytest.approx(0.0)
    assert by_method.loc['NN+2opt', 'max'] == pytest.approx(100 * (1 - 30 / (20 * np.sqrt(2) + 10)))


def test_aggregate_no_files(tmp_path):
    with pytest.raises(SystemExit):
        plot_reductions.main(str(tmp_path / "*.csv"))


def test_aggregate_missing_columns(tmp_path):
    (tmp_path / "summary.csv").write_text("method,length\nNN,1.0\n", encoding="utf-8")
    with pytest.raises(ValueError):
        plot_reductions.main(str(tmp_path / "summary.csv"))


def test_batch_same_basename_kept_apart(tmp_path):
    a, b = tmp_path / "a", tmp_path / "b"
    a.mkdir(); b.mkdir()
    (a / "scan.csv").write_text(CROSSING, encoding="utf-8")
    (b / "scan.csv").write_text("A,0,0,0\nB,10,0,0\nC,10,10,0\nD,0,10,0\n", encoding="utf-8")
    out_dir = str(tmp_path / "runs")
    df = run_batch([str(a / "scan.csv"), str(b / "scan.csv")], out_dir=out_dir)
    assert df['output'].nunique() == 2
    assert df['run_dir'].nunique() == 2
    for out, labels in zip(df['output'], [['P0', 'P1', 'P2', 'P3'], ['A', 'B', 'C', 'D']]):
        assert read_points(out)['labels'] == labels


def test_batch_same_tag_configs_kept_apart(tmp_path, crossing_file):
    cfgs = []
    for i, construct in enumerate(['nn', 'identity']):
        p = tmp_path / f"cfg{i}.json"
        p.write_text(json.dumps({'construct': construct, 'tag': 'same'}), encoding="utf-8")
        cfgs.append(str(p))
    df = run_batch([crossing_file], configs=cfgs, out_dir=str(tmp_path / "runs"))
    assert df['run_dir'].nunique() == 2
    assert df['config'].tolist() == cfgs
    for run_dir in df['run_dir']:
        assert os.path.exists(os.path.join(run_dir, "solution.json"))


def test_show_without_plot_dir_uses_run_dir(tmp_path, crossing_file, monkeypatch):
    monkeypatch.setattr("matplotlib.pyplot.show", lambda *a, **k: None)
    monkeypatch.chdir(tmp_path)
    summary = run(crossing_file, "o.csv", show=True, out_dir="runs", tag="s")
    assert len(summary['plots']) == 3
    for png in summary['plots']:
        assert os.path.dirname(png) == os.path.join("runs", "s_crossing")
        assert os.path.exists(png)
    assert not [f for f in os.listdir(tmp_path) if f.endswith(".png")]
