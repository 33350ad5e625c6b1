from argparse import Namespace
import configparser
import os

from motorshop.errors import MotorshopError

RC_FILE_HELP = """\
Sample rcfile:
    [gateway]
    backend = memory|sqlite|rest  # default=memory
    database = /path/to/motorshop.sqlite3  # sqlite, default=<state-dir>/db/...
    url = https://example.supabase.co  # rest
    api key = <service key>  # rest
    timeout = 10  # rest, seconds
    [jobs]
    number prefix = JOB
"""

DEFAULT_STATE_DIR = "~/.local/share/motorshop"
DEFAULT_RC_FILE = "~/.config/motorshoprc"
DEFAULT_DB_NAME = "motorshop.sqlite3"
DEFAULT_JOB_NUMBER_PREFIX = "JOB"
DEFAULT_REST_TIMEOUT = 10.0


class ConfigEnum(object):
    __slots__ = (
        'defaultName',
        '_enumVals',
    )

    def __init__(self, default, **enumVals):
        self._enumVals = enumVals
        assert default in enumVals
        self.defaultName = default
        for enumName in enumVals:
            assert enumName not in self.__slots__

    def names(self):
        return iter(self._enumVals.keys())

    def values(self):
        return iter(self._enumVals.values())

    @property
    def defaultVal(self):
        return self._enumVals[self.defaultName]

    def __getattr__(self, attr):
        assert attr != '_enumVals'
        if attr in self._enumVals:
            return self._enumVals[attr]
        else:
            return object.__getattribute__(self, attr)


GATEWAY_BACKEND = ConfigEnum(
    'MEMORY',  # default
    MEMORY='memory',
    SQLITE='sqlite',
    REST='rest',
)


class ConfigError(MotorshopError):
    pass


def _getConfig(cfgParser, section, option, defaultValue=None):
    if not cfgParser.has_section(section):
        return defaultValue
    if not cfgParser.has_option(section, option):
        return defaultValue
    return cfgParser.get(section, option)


def _getEnumConfig(cfgParser, section, option, enum):
    optionVal = _getConfig(
        cfgParser, section, option, enum.defaultVal)
    if optionVal not in list(enum.values()):
        raise ConfigError(
            "RC file has invalid \"{section}.{option}\" setting {optionVal}.  Valid "
            "options: {allowedVals}".format(
                section=section,
                option=option,
                optionVal=optionVal,
                allowedVals=", ".join(list(enum.values()))))

    return optionVal


def _getFloatConfig(cfgParser, section, option, default):
    val = _getConfig(cfgParser, section, option, None)
    if val is None:
        return default
    try:
        parsed = float(val)
    except ValueError:
        parsed = -1.0
    if parsed <= 0:
        raise ConfigError(
            "RC file has invalid \"{section}.{option}\" setting {optionVal}.  Valid "
            "options: a positive number".format(
                section=section,
                option=option,
                optionVal=val))
    return parsed


def defaultOptions(**overrides):
    """
    Options for Config taken from the environment, for embedding
    applications that have no command line of their own.
    """
    options = Namespace(
        stateDir=os.getenv('MOTORSHOP_STATE_DIR', DEFAULT_STATE_DIR),
        rcFile=os.getenv('MOTORSHOP_RC_FILE', DEFAULT_RC_FILE),
        debug=False,
    )
    for name, value in overrides.items():
        setattr(options, name, value)
    return options


class Config(object):
    validConfig = {
        'gateway': {'backend', 'database', 'url', 'api key', 'timeout'},
        'jobs': {'number prefix'},
    }

    def _validateConfigParser(self, cfgParser):
        cfgSections = set(cfgParser.sections())
        unknownSections = cfgSections - set(self.validConfig.keys())
        if unknownSections:
            raise ConfigError(
                "RC file has unknown configuration sections: {}".format(
                    ", ".join(sorted(unknownSections))))
        for section in cfgSections:
            cfgValues = set(cfgParser.options(section))
            unknownOptions = cfgValues - self.validConfig[section]
            if unknownOptions:
                raise ConfigError(
                    "RC file has unknown configuration options in "
                    "section \"{}\": {}".format(
                        section, ", ".join(sorted(unknownOptions))))

    def __init__(self, options):
        stateDir = options.stateDir
        self.options = options
        self._dbDir = os.path.expanduser(stateDir) + "/db/"
        self._logDir = os.path.expanduser(stateDir) + "/log/"

        rcFile = os.path.expanduser(options.rcFile)
        cfgParser = configparser.RawConfigParser()
        cfgParser.read(rcFile)

        self._validateConfigParser(cfgParser)

        self._backend = _getEnumConfig(
            cfgParser, 'gateway', 'backend', GATEWAY_BACKEND)
        database = _getConfig(cfgParser, 'gateway', 'database', None)
        self._database = os.path.expanduser(database) if database else None
        self._restUrl = _getConfig(cfgParser, 'gateway', 'url', None)
        self._restApiKey = _getConfig(cfgParser, 'gateway', 'api key', "")
        self._restTimeout = _getFloatConfig(
            cfgParser, 'gateway', 'timeout', DEFAULT_REST_TIMEOUT)
        self._jobNumberPrefix = _getConfig(
            cfgParser, 'jobs', 'number prefix', DEFAULT_JOB_NUMBER_PREFIX)

        if self._backend == GATEWAY_BACKEND.REST and not self._restUrl:
            raise ConfigError(
                "RC file selects the rest gateway but \"gateway.url\" is not set")
        if not self._jobNumberPrefix or '-' in self._jobNumberPrefix:
            raise ConfigError(
                "RC file has invalid \"jobs.number prefix\" setting {}.  It must "
                "be non-empty and contain no '-'".format(self._jobNumberPrefix))

    @property
    def debug(self):
        return getattr(self.options, 'debug', False)

    @staticmethod
    def checkDir(dirName):
        if not os.access(dirName, os.W_OK | os.X_OK | os.R_OK):
            os.makedirs(dirName)
        return dirName

    @property
    def dbDir(self):
        return self.checkDir(self._dbDir)

    @property
    def logDir(self):
        return self.checkDir(self._logDir)

    @property
    def backend(self):
        return self._backend

    @property
    def databasePath(self):
        if self._database:
            return self._database
        return os.path.join(self.dbDir, DEFAULT_DB_NAME)

    @property
    def restUrl(self):
        return self._restUrl

    @property
    def restApiKey(self):
        return self._restApiKey

    @property
    def restTimeout(self):
        return self._restTimeout

    @property
    def jobNumberPrefix(self):
        return self._jobNumberPrefix
