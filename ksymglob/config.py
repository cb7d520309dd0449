##############################################################################
# Copyright by The HDF Group.                                                #
# All rights reserved.                                                       #
#                                                                            #
# This file is part of HSDS (HDF5 Scalable Data Service), Libraries and      #
# Utilities.  The full HSDS copyright notice, including                      #
# terms governing use, modification, and redistribution, is contained in     #
# the file COPYING, which can be found at the root of the source code        #
# distribution tree.  If you do not have access to this file, you may        #
# request a copy from help@hdfgroup.org.                                     #
##############################################################################
import os
import sys
import yaml

cfg = {}

DEFAULT_CONFIG_DIRS = [".", "/etc/ksymglob/"]


def eprint(*args, **kwargs):
    print(*args, file=sys.stderr, **kwargs)


def debug(*args, **kwargs):
    # can't use log.debug since that calls back to cfg
    if "LOG_LEVEL" in os.environ and os.environ["LOG_LEVEL"] == "DEBUG":
        eprint("DEBUG>", *args, **kwargs)


def _has_unit(cfgval):
    """ return True if val has unit char at end of string,
        otherwise return False
    """
    if isinstance(cfgval, str):
        if len(cfgval) > 1 and cfgval[-1] in ('g', 'm', 'k'):
            if cfgval[:-1].isdigit():
                return True
    return False


def _convert(cfgval, override):
    # convert override to same type as the yaml value
    if isinstance(cfgval, bool):
        if isinstance(override, bool):
            return override
        return str(override).lower() in ("1", "true", "yes", "on")
    if isinstance(override, bool):
        # bare "--x" flag only applies to boolean keys
        raise ValueError("expected a value, got a flag")
    return type(cfgval)(override)


def getCmdLineArg(x):
    # return value of command-line option
    # use "--x=val" to set option 'x' to 'val'
    # use "--x" for boolean flags
    option = '--'+x+'='
    for i in range(1, len(sys.argv)):
        arg = sys.argv[i]
        if arg == '--'+x:
            # boolean flag
            debug(f"got cmd line flag for {x}")
            return True
        elif arg.startswith(option):
            # found an override
            override = arg[len(option):]  # return text after option string
            debug(f"got cmd line override for {x}")
            return override
    return None


def _find_yml(config_dirs):
    for config_dir in config_dirs:
        for ext in ("yml", "yaml"):
            file_name = os.path.join(config_dir, f"config.{ext}")
            debug("checking config path:", file_name)
            if os.path.isfile(file_name):
                return file_name
    return None


def _load_yml(file_name):
    try:
        with open(file_name, "r") as f:
            return yaml.safe_load(f)
    except yaml.scanner.ScannerError as se:
        msg = f"Error parsing '{file_name}': {se}"
        eprint(msg)
        raise KeyError(msg)


def _load_cfg():
    # load config yaml
    config_dirs = []
    # check if there is a command line option for config directory
    config_dir = getCmdLineArg("config-dir")
    # check cmdLineArg with underline
    if not config_dir:
        config_dir = getCmdLineArg("config_dir")
    debug("got config_dir:", config_dir)

    if config_dir:
        config_dirs.append(config_dir)
    if not config_dirs and "CONFIG_DIR" in os.environ:
        config_dir = os.environ["CONFIG_DIR"]
        config_dirs.append(config_dir)
        debug(f"got environment override for config-dir: {config_dir}")
    if not config_dirs:
        config_dirs = DEFAULT_CONFIG_DIRS
    yml_file = _find_yml(config_dirs)
    if not yml_file:
        # use yaml file embedded in package
        package_dir = os.path.dirname(__file__)
        yml_file = os.path.join(package_dir, "default_config.yml")
    debug(f"_load_cfg with '{yml_file}'")
    yml_config = _load_yml(yml_file)

    # load override yaml
    yml_override = None
    if "CONFIG_OVERRIDE_PATH" in os.environ:
        override_yml_filepath = os.environ["CONFIG_OVERRIDE_PATH"]
    elif config_dir and os.path.isfile(os.path.join(config_dir, "override.yml")):
        override_yml_filepath = os.path.join(config_dir, "override.yml")
    else:
        override_yml_filepath = "/etc/ksymglob/override.yml"
    debug("override file path:", override_yml_filepath)
    if os.path.isfile(override_yml_filepath):
        debug(f"loading override configuation: {override_yml_filepath}")
        yml_override = _load_yml(override_yml_filepath)

    # apply overrides for each key and store in cfg global
    for x in yml_config:
        cfgval = yml_config[x]
        # see if there is a command-line override
        override = getCmdLineArg(x)

        # see if there are an environment variable override
        if override is None and x.upper() in os.environ:
            override = os.environ[x.upper()]
            debug(f"got env value override for {x} ")

        # see if there is a yml override
        if override is None and yml_override and x in yml_override:
            override = yml_override[x]
            debug(f"got config override for {x}")

        if override is not None:
            if cfgval is not None:
                try:
                    override = _convert(cfgval, override)
                except ValueError as ve:
                    msg = "Error applying command line override value for "
                    msg += f"key: {x}: {ve}"
                    eprint(msg)
                    raise KeyError(msg)
            cfgval = override  # replace the yml value

        if _has_unit(cfgval):
            # convert values like 512k to corresponding integer
            u = cfgval[-1]
            n = int(cfgval[:-1])
            if u == 'k':
                cfgval = n * 1024
            elif u == 'm':
                cfgval = n * 1024*1024
            elif u == 'g':
                cfgval = n * 1024*1024*1024
            else:
                raise ValueError("Unexpected unit char")
        cfg[x] = cfgval


def get(x, default=None):
    """ get x if found in config
        otherwise return default
    """
    if not cfg:
        _load_cfg()
    if x not in cfg:
        if default is not None:
            cfg[x] = default
        else:
            raise KeyError(f"config value {x} not found")
    return cfg[x]
