import os
import tempfile
import unittest

from mock import MagicMock, patch

from motorshop import config

from .helpers import HOME, environ, resetEnv

EXAMPLE_RCFILE = """\
[gateway]
backend = rest
url = https://shop.example.com
api key = k3y
timeout = 2.5
[jobs]
number prefix = WO
"""

BAD_SECTION = """\
[unknown]
"""


def setUpModule():
    resetEnv()


class TestMixin(object):
    @staticmethod
    def config(tempFp=None):
        options = MagicMock()
        options.rcFile = tempFp.name if tempFp else '/a-file-does-not-exist.cfg'
        options.stateDir = '~/x'
        options.debug = False
        return config.Config(options)

    @staticmethod
    def rcFile(text):
        tempFp = tempfile.NamedTemporaryFile(mode='w')
        tempFp.write(text)
        tempFp.flush()
        return tempFp


class TestRcParser(unittest.TestCase, TestMixin):
    @patch('os.makedirs')
    def testStateDir(self, _makedirs):
        cfgObj = self.config()
        self.assertEqual(os.path.join(HOME, 'x/db/'), cfgObj.dbDir)
        self.assertEqual(os.path.join(HOME, 'x/log/'), cfgObj.logDir)

    # pylint: disable-msg=too-many-arguments
    def assertCfg(self, cfgObj, backend='memory', restUrl=None, restApiKey='',
                  restTimeout=config.DEFAULT_REST_TIMEOUT, prefix='JOB'):
        self.assertEqual(backend, cfgObj.backend)
        self.assertEqual(restUrl, cfgObj.restUrl)
        self.assertEqual(restApiKey, cfgObj.restApiKey)
        self.assertEqual(restTimeout, cfgObj.restTimeout)
        self.assertEqual(prefix, cfgObj.jobNumberPrefix)

    def testNoFile(self):
        cfgObj = self.config()
        self.assertCfg(cfgObj)
        self.assertFalse(cfgObj.debug)

    def testEmptyFile(self):
        with self.rcFile("") as tempFp:
            self.assertCfg(self.config(tempFp))

    def testConfigured(self):
        with self.rcFile(EXAMPLE_RCFILE) as tempFp:
            cfgObj = self.config(tempFp)
            self.assertCfg(
                cfgObj, backend='rest', restUrl='https://shop.example.com',
                restApiKey='k3y', restTimeout=2.5, prefix='WO')

    @patch('os.makedirs')
    def testDefaultDatabasePath(self, _makedirs):
        with self.rcFile("[gateway]\nbackend = sqlite\n") as tempFp:
            cfgObj = self.config(tempFp)
            self.assertEqual(config.GATEWAY_BACKEND.SQLITE, cfgObj.backend)
            self.assertEqual(
                os.path.join(HOME, 'x/db/', config.DEFAULT_DB_NAME),
                cfgObj.databasePath)

    def testDatabasePath(self):
        with self.rcFile("[gateway]\ndatabase = ~/shop.db\n") as tempFp:
            cfgObj = self.config(tempFp)
            self.assertEqual(os.path.join(HOME, 'shop.db'), cfgObj.databasePath)


class TestMalformedRcFile(unittest.TestCase, TestMixin):
    def testBadSection(self):
        with self.rcFile(EXAMPLE_RCFILE + BAD_SECTION) as tempFp:
            pattern = r'unknown configuration sections: unknown'
            with self.assertRaisesRegex(config.ConfigError, pattern):
                self.config(tempFp)

    def testBadOption(self):
        with self.rcFile(EXAMPLE_RCFILE + "xyz = foo\n") as tempFp:
            pattern = r'unknown configuration options in section "jobs": xyz'
            with self.assertRaisesRegex(config.ConfigError, pattern):
                self.config(tempFp)

    def testBadBackend(self):
        with self.rcFile("[gateway]\nbackend = postgres\n") as tempFp:
            pattern = (
                r'RC file has invalid "gateway.backend" setting postgres.\s*' +
                r'Valid options: memory, sqlite, rest'
            )
            with self.assertRaisesRegex(config.ConfigError, pattern):
                self.config(tempFp)

    def testRestWithoutUrl(self):
        with self.rcFile("[gateway]\nbackend = rest\n") as tempFp:
            with self.assertRaisesRegex(config.ConfigError, r'"gateway.url"'):
                self.config(tempFp)

    def testBadTimeout(self):
        for value in ('0', '-3', 'soon'):
            with self.rcFile("[gateway]\ntimeout = %s\n" % value) as tempFp:
                with self.assertRaisesRegex(config.ConfigError, 'positive number'):
                    self.config(tempFp)

    def testBadPrefix(self):
        with self.rcFile("[jobs]\nnumber prefix = WO-X\n") as tempFp:
            with self.assertRaisesRegex(config.ConfigError, 'number prefix'):
                self.config(tempFp)


class TestDefaultOptions(unittest.TestCase):
    def testFromEnvironment(self):
        with environ(MOTORSHOP_STATE_DIR='/srv/shop', MOTORSHOP_RC_FILE='/etc/shoprc'):
            options = config.defaultOptions()
        self.assertEqual('/srv/shop', options.stateDir)
        self.assertEqual('/etc/shoprc', options.rcFile)
        self.assertFalse(options.debug)

    def testOverrides(self):
        options = config.defaultOptions(debug=True, rcFile='/dev/null')
        self.assertTrue(options.debug)
        self.assertEqual('/dev/null', options.rcFile)
        self.assertTrue(config.Config(options).debug)
