import pytest

from valq.testing import valq_test_env


@pytest.fixture(autouse=True)
def valq_env():
    with valq_test_env():
        yield
