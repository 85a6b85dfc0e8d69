"""tests/unit/test_version.py"""

import courier


def test_version():
    """Verify that the version string is present and valid."""
    assert isinstance(courier.__version__, str)
    assert len(courier.__version__) > 0
    # Basic semver-ish check
    assert courier.__version__.count(".") >= 1
