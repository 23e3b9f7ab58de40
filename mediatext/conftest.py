# Licensed under the GPLv3 - see LICENSE
# Configures the pytest header so that the versions of the libraries used
# to interpret the text media files are shown when running the tests.
import os

try:
    from pytest_astropy_header.display import (PYTEST_HEADER_MODULES,
                                               TESTED_VERSIONS)
except ImportError:
    pass
else:
    def pytest_configure(config):

        config.option.astropy_header = True

        PYTEST_HEADER_MODULES.clear()
        PYTEST_HEADER_MODULES['Astropy'] = 'astropy'
        PYTEST_HEADER_MODULES['Numpy'] = 'numpy'
        PYTEST_HEADER_MODULES['entrypoints'] = 'entrypoints'

        try:
            from .version import version
        except ImportError:  # Can happen in source checkout.
            version = 'from source'

        packagename = os.path.basename(os.path.dirname(__file__))
        TESTED_VERSIONS[packagename] = version
