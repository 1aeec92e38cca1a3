import logging
from unittest.mock import patch

from click.testing import CliRunner
import pytest
import shapely

from wktkit.cli import cli


# Unit tests for the 'cli' module functions.
#
# The test boundary is the cli module's interface with the tools module.
# Most tests run the real tools against temporary files and write geometry
# to named outputs, since standard output is written at the descriptor
# level and bypasses the runner's capture.

@pytest.fixture
def cli_runner():
    return CliRunner()

@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logging.getLogger("wktkit").handlers.clear()

def test_without_subcommand(cli_runner):
    result = cli_runner.invoke(cli)
    assert 'Usage' in result.output
    assert 'Commands' in result.output
    for subcommand in ['bounds', 'convert', 'hull', 'info', 'init', 'plot', 'rand']:
        assert subcommand in result.output

def test_help(cli_runner):
    result = cli_runner.invoke(cli, ['--help'])
    assert result.exit_code == 0

def test_info_with_defaults(cli_runner):
    result = cli_runner.invoke(cli, ['info'])
    assert result.exit_code == 0
    for key in ['reader_format', 'writer_format', 'rounding_precision', 'retry_multiplier', 'plot_format']:
        assert key in result.output

def test_info_with_missing_config(cli_runner, tmp_path):
    result = cli_runner.invoke(cli, ['info', '-c', str(tmp_path / 'missing.ini')])
    assert result.exit_code == 2
    assert 'Unable to find configuration file' in result.output

@patch('wktkit.tools.init_config', return_value='wktkit.ini')
def test_init_calls_init_config(mock, cli_runner):
    result = cli_runner.invoke(cli, ['init', '-c', 'wktkit.ini'])
    assert result.exit_code == 0
    mock.assert_called_once_with('wktkit.ini')
    assert 'wktkit.ini' in result.output

def test_hull(cli_runner, wkt_file, tmp_path, points_wkt):
    out = tmp_path / 'hull.wkt'
    result = cli_runner.invoke(cli, ['hull', wkt_file, str(out)])

    assert result.exit_code == 0
    assert shapely.from_wkt(out.read_text()).equals(shapely.convex_hull(shapely.from_wkt(points_wkt)))

def test_hull_hex(cli_runner, hex_file, tmp_path):
    out = tmp_path / 'hull.hex'
    result = cli_runner.invoke(cli, ['hull', '-B', hex_file, str(out)])

    assert result.exit_code == 0
    assert shapely.from_wkb(out.read_text()).geom_type == 'Polygon'

def test_hull_missing_input(cli_runner, tmp_path):
    result = cli_runner.invoke(cli, ['hull', str(tmp_path / 'missing.wkt'), str(tmp_path / 'out.wkt')])

    assert result.exit_code == 1
    assert 'Unable to process geometry' in result.output
    assert 'missing.wkt' in result.output

def test_hull_with_config_file(cli_runner, wkt_file, tmp_path):
    ini = tmp_path / 'wktkit.ini'
    ini.write_text('[Formats]\nwriter = hex\n\n[Binary]\nhex_case = lower\n')
    out = tmp_path / 'hull.hex'

    result = cli_runner.invoke(cli, ['hull', '-c', str(ini), wkt_file, str(out)])

    assert result.exit_code == 0
    text = out.read_text()
    assert text == text.lower()
    assert shapely.from_wkb(text).geom_type == 'Polygon'

def test_invalid_config_file(cli_runner, wkt_file, tmp_path):
    ini = tmp_path / 'wktkit.ini'
    ini.write_text('[Formats]\nwriter = svg\n')

    result = cli_runner.invoke(cli, ['hull', '-c', str(ini), wkt_file])

    assert result.exit_code == 2
    assert 'writer format' in result.output

def test_convert(cli_runner, wkt_file, tmp_path, points_wkt):
    out = tmp_path / 'points.wkb'
    result = cli_runner.invoke(cli, ['convert', '--to', 'binary', wkt_file, str(out)])

    assert result.exit_code == 0
    assert shapely.from_wkb(out.read_bytes()).equals(shapely.from_wkt(points_wkt))

def test_convert_rejects_unknown_format(cli_runner, wkt_file):
    result = cli_runner.invoke(cli, ['convert', '--to', 'geojson', wkt_file])
    assert result.exit_code == 2

def test_bounds(cli_runner, wkt_file):
    result = cli_runner.invoke(cli, ['bounds', wkt_file])

    assert result.exit_code == 0
    assert result.output.strip() == '0.0 5.0 0.0 8.0'

def test_bounds_parse_failure(cli_runner, bad_wkt_file):
    result = cli_runner.invoke(cli, ['bounds', bad_wkt_file])
    assert result.exit_code == 1
    assert 'Unable to process geometry' in result.output

def test_rand(cli_runner, tmp_path):
    out = tmp_path / 'rand.wkt'
    result = cli_runner.invoke(cli, ['rand', '-n', '5', '-x', '10', '-y', '10', '-s', '3', '-q', '1', str(out)])

    assert result.exit_code == 0
    points = shapely.from_wkt(out.read_text())
    assert shapely.get_num_geometries(points) == 5

@patch('wktkit.tools.rand', return_value=0)
def test_rand_passes_options(mock, cli_runner):
    result = cli_runner.invoke(cli, ['rand', '-n', '7', '-u', '-d', '0.5', '-k', '4', '-B'])

    assert result.exit_code == 0
    configuration = mock.call_args.args[0]
    assert configuration.count == 7
    assert configuration.unique
    assert configuration.distance == 0.5
    assert configuration.retry_multiplier == 4
    assert configuration.writer_format == 'hex'
    assert configuration.reader_format == 'none'

def test_rand_rejects_negative_count(cli_runner):
    result = cli_runner.invoke(cli, ['rand', '-n', '-1'])
    assert result.exit_code == 2
    assert 'count' in result.output

def test_plot(cli_runner, mixed_file, tmp_path):
    out = tmp_path / 'mixed.svg'
    result = cli_runner.invoke(cli, ['plot', '-T', 'svg', '-w', '0.5', '--pen', 'blue', mixed_file, str(out)])

    assert result.exit_code == 0
    assert b'<svg' in out.read_bytes()
