import json
import shutil
from pathlib import Path

import pytest

import stylematch.__main__ as cli

DATA = Path(__file__).parent / 'data'


@pytest.fixture
def la_paths(tmp_path):
    paths = []
    for name in ('la_vocab.json', 'la_facts.json', 'la_style.json'):
        target = tmp_path / name
        shutil.copy(DATA / name, target)
        paths.append(str(target))
    return paths


def test_main_prints_substitutions_per_block(la_paths, capsys):
    cli.main(la_paths)

    out = capsys.readouterr().out.splitlines()
    assert out[0] == '[0] Colors'
    assert out[1] == '  (no matches)'
    assert '[2] forall Vector v' in out
    assert '  {v -> x1, U -> X, w -> x2}' in out
    assert out[-2:] == ['[7] forall Vector `x1`; Vector w where Orthogonal(x1, w)', '  {w -> x2}']


def test_main_same_output_without_prefilter(la_paths, capsys):
    cli.main(la_paths)
    baseline = capsys.readouterr().out

    cli.main(la_paths + ['--no-prefilter'])

    assert capsys.readouterr().out == baseline


def test_check_reports_warnings(la_paths, tmp_path, capsys):
    style = json.loads(Path(la_paths[2]).read_text(encoding='utf-8'))
    style['blocks'].append(
        {
            'kind': 'selector',
            'line': 9,
            'col': 1,
            'head': [{'type': 'Matrix', 'var': {'kind': 'style', 'name': 'm'}}],
        }
    )
    style_path = tmp_path / 'style_extra.json'
    style_path.write_text(json.dumps(style), encoding='utf-8')

    cli.main(la_paths[:2] + [str(style_path), '--check'])

    out = capsys.readouterr().out.splitlines()
    assert out[0] == 'Warnings:'
    assert out[1] == '  - [line 9, col 1] selector 8 uses unknown type(s): Matrix'


def test_check_without_warnings(la_paths, capsys):
    cli.main(la_paths + ['--check'])

    assert capsys.readouterr().out.splitlines() == ['Warnings:', '  (none)']


def test_invalid_style_exits_with_error(la_paths, tmp_path):
    style_path = tmp_path / 'bad_style.json'
    style_path.write_text(
        json.dumps(
            {
                'blocks': [
                    {
                        'kind': 'selector',
                        'head': [{'type': 'Vector', 'var': {'kind': 'style', 'name': 'v'}}],
                        'where': [
                            {'kind': 'pred', 'name': 'Unit', 'args': [{'kind': 'var', 'var': {'kind': 'style', 'name': 'q'}}]}
                        ],
                    }
                ]
            }
        ),
        encoding='utf-8',
    )

    with pytest.raises(SystemExit) as exc:
        cli.main(la_paths[:2] + [str(style_path)])

    assert exc.value.code == 1


def test_unreadable_json_exits_with_error(la_paths, tmp_path):
    broken = tmp_path / 'facts.json'
    broken.write_text('not json', encoding='utf-8')

    with pytest.raises(SystemExit) as exc:
        cli.main([la_paths[0], str(broken), la_paths[2]])

    assert exc.value.code == 1


def test_subtypes_flag_widens_matches(tmp_path, capsys):
    (tmp_path / 'vocab.json').write_text(
        json.dumps({'types': ['Vector', 'UnitVector'], 'subtypes': [['UnitVector', 'Vector']]}),
        encoding='utf-8',
    )
    (tmp_path / 'facts.json').write_text(
        json.dumps({'statements': [{'kind': 'decl', 'type': 'UnitVector', 'name': 'e'}]}),
        encoding='utf-8',
    )
    (tmp_path / 'style.json').write_text(
        json.dumps({'blocks': [{'kind': 'selector', 'head': [{'type': 'Vector', 'var': {'kind': 'style', 'name': 'v'}}]}]}),
        encoding='utf-8',
    )
    paths = [str(tmp_path / name) for name in ('vocab.json', 'facts.json', 'style.json')]

    cli.main(paths)
    assert capsys.readouterr().out.splitlines()[1] == '  (no matches)'

    cli.main(paths + ['--subtypes'])
    assert capsys.readouterr().out.splitlines()[1] == '  {v -> e}'


def test_malformed_vocabulary_exits_with_error(la_paths, tmp_path):
    vocab_path = tmp_path / 'vocab_bad.json'
    vocab_path.write_text(json.dumps({'types': {'Vector': 'nullary'}}), encoding='utf-8')

    with pytest.raises(SystemExit) as exc:
        cli.main([str(vocab_path)] + la_paths[1:])

    assert exc.value.code == 1
