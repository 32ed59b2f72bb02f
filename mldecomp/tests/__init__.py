"""Test suite for the mldecomp package."""

from mldecomp.tests.test_als import *  # noqa: F403
from mldecomp.tests.test_core import *  # noqa: F403
from mldecomp.tests.test_cp import *  # noqa: F403
from mldecomp.tests.test_decomposition import *  # noqa: F403
from mldecomp.tests.test_utils import *  # noqa: F403
