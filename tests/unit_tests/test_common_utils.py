import pytest

from inlets.utils import common_utils
from inlets.utils import env_options
from inlets.utils import schemas


class TestBackoff:

    def test_grows_and_caps(self, monkeypatch):
        monkeypatch.setattr(common_utils.random, 'uniform', lambda a, b: 0)
        backoff = common_utils.Backoff(initial_backoff=1,
                                       max_backoff_factor=4,
                                       multiplier=2)
        assert [backoff.current_backoff() for _ in range(5)] == [
            1, 2, 4, 4, 4
        ]

    def test_jitter_is_bounded(self):
        backoff = common_utils.Backoff(initial_backoff=10)
        assert 6 <= backoff.current_backoff() <= 14


class TestValidateSchema:

    def test_valid(self):
        common_utils.validate_schema({'azure': {
            'image': 'x',
            'cpu': 0.5
        }}, schemas.get_config_schema())

    def test_skip_none(self):
        common_utils.validate_schema({'azure': None},
                                     schemas.get_config_schema())
        with pytest.raises(ValueError):
            common_utils.validate_schema({'azure': None},
                                         schemas.get_config_schema(),
                                         skip_none=False)

    def test_prefix_and_suggestion(self):
        with pytest.raises(ValueError) as e:
            common_utils.validate_schema({'azure': {
                'cpus': 1
            }}, schemas.get_config_schema(), 'Invalid config: ')
        assert str(e.value) == ("Invalid config: Instead of 'cpus', did you "
                                "mean 'cpu'?")


def test_env_options(monkeypatch):
    monkeypatch.delenv('INLETS_DEBUG', raising=False)
    assert not env_options.Options.SHOW_DEBUG_INFO.get()
    monkeypatch.setenv('INLETS_DEBUG', 'true')
    assert env_options.Options.SHOW_DEBUG_INFO.get()
