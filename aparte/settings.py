#
# (C) Copyright 2011 Jacek Konieczny <jajcus@jajcus.net>
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU Lesser General Public License Version
# 2.1 as published by the Free Software Foundation.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this program; if not, write to the Free Software
# Foundation, Inc., 675 Mass Ave, Cambridge, MA 02139, USA.
#
# pylint: disable-msg=W0201

"""General settings container.

The behaviour of the client core may be controlled by a few parameters, like
the query timeout or the preferred languages. Those need to be passed from
one component to another and passing them directly via function parameters
would only mess up the API.

Instead an `AparteSettings` object is used to pass all the optional
parameters. It also provides the defaults.

This is also a mechanism for dependency injection, allowing different
components to share the same objects, like the event queue or the Tornado
I/O loop.
"""

__docformat__ = "restructuredtext en"

from collections.abc import MutableMapping

class _SettingDefinition(object):
    """Definition of a registered setting."""
    # pylint: disable-msg=R0903,R0913
    def __init__(self, name, type = str, default = None, factory = None,
                        cache = False, doc = None, validator = None):
        self.name = name
        self.type = type
        self.default = default
        self.factory = factory
        self.cache = cache
        self.doc = doc
        self.validator = validator

class AparteSettings(MutableMapping):
    """Container for various parameters used all over Aparte.

    It can be used like a regular dictionary, but will provide reasonable
    defaults for parameters which are not explicitely set.

    :CVariables:
        - `_defs`: definitions of the registered parameters.
    :Ivariables:
        - `_settings`: current values of the parameters explicitely set.
    """
    _defs = {}
    def __init__(self, data = None):
        """Create settings, optionally initialized with `data`.

        :Parameters:
            - `data`: initial data
        :Types:
            - `data`: any mapping, including `AparteSettings`
        """
        self._settings = {}
        if data is not None:
            for key, value in dict(data).items():
                self[key] = value

    def __len__(self):
        """Number of parameters set."""
        return len(self._settings)

    def __iter__(self):
        """Iterate over the parameter names."""
        return iter(self._settings)

    def __contains__(self, key):
        """Check if a parameter is set.

        :Parameters:
            - `key`: the parameter name
        :Types:
            - `key`: `str`
        """
        return key in self._settings

    def __getitem__(self, key):
        """Get a parameter value. Return the default if no value is set
        and the default is provided by Aparte.

        :Parameters:
            - `key`: the parameter name
        :Types:
            - `key`: `str`
        """
        return self.get(key, required = True)

    def __setitem__(self, key, value):
        """Set a parameter value. The value is passed through the validator
        of the setting, if any.

        :Parameters:
            - `key`: the parameter name
            - `value`: the new value
        :Types:
            - `key`: `str`
        """
        setting_def = self._defs.get(key)
        if setting_def is not None and setting_def.validator is not None:
            if value is not None:
                value = setting_def.validator(value)
        self._settings[str(key)] = value

    def __delitem__(self, key):
        """Unset a parameter value.

        :Parameters:
            - `key`: the parameter name
        :Types:
            - `key`: `str`
        """
        del self._settings[key]

    def get(self, key, local_default = None, required = False):
        """Get a parameter value.

        If parameter is not set, return `local_default` if it is not `None`
        or the global default otherwise.

        :Raise `KeyError`: if parameter has no value and no global default

        :Return: parameter value
        """
        # pylint: disable-msg=W0221
        if key in self._settings:
            return self._settings[key]
        if local_default is not None:
            return local_default
        if key in self._defs:
            setting_def = self._defs[key]
            if setting_def.default is not None:
                return setting_def.default
            factory = setting_def.factory
            if factory is None:
                return None
            value = factory(self)
            if setting_def.cache is True:
                self._settings[key] = value
            return value
        if required:
            raise KeyError(key)
        return local_default

    @classmethod
    def add_setting(cls, name, **kwargs):
        """Register a setting.

        A setting may be registered more than once (e.g. by two modules
        needing it), but the definitions must not conflict.

        :Parameters:
            - `name`: the setting name
            - `kwargs`: the setting definition (`type`, `default`, `factory`,
              `cache`, `doc`, `validator`)
        """
        setting_def = _SettingDefinition(name, **kwargs)
        if name not in cls._defs:
            cls._defs[name] = setting_def
            return
        duplicate = cls._defs[name]
        if duplicate.type != setting_def.type:
            raise ValueError("Setting duplicate, with a different type")
        if duplicate.default != setting_def.default:
            raise ValueError("Setting duplicate, with a different default")
        if duplicate.factory != setting_def.factory:
            raise ValueError("Setting duplicate, with a different factory")

    @classmethod
    def add_defaults(cls, defaults):
        """Register several settings with only a default value.

        :Parameters:
            - `defaults`: setting name to default value mapping
        :Types:
            - `defaults`: `dict`
        """
        for name, value in defaults.items():
            cls.add_setting(name, type = type(value), default = value)

    @classmethod
    def add_default_factory(cls, name, factory, cache = False):
        """Register a setting which default value is computed by a factory
        function.

        :Parameters:
            - `name`: the setting name
            - `factory`: function called with the settings object to compute
              the value
            - `cache`: if `True` the computed value is stored in the settings
              object asking for it
        """
        cls.add_setting(name, type = object, factory = factory, cache = cache)

    @staticmethod
    def validate_string_list(value):
        """Accept a list of strings or a comma-separated string."""
        if isinstance(value, (list, tuple)):
            return [str(x) for x in value]
        try:
            return [x.strip() for x in value.split(",")]
        except (AttributeError, TypeError):
            raise ValueError("Bad string list")

    @staticmethod
    def validate_positive_int(value):
        value = int(value)
        if value <= 0:
            raise ValueError("Positive number required")
        return value

    @staticmethod
    def validate_positive_float(value):
        value = float(value)
        if value <= 0:
            raise ValueError("Positive number required")
        return value

    @staticmethod
    def get_int_range_validator(start, stop):
        def validate_int_range(value):
            value = int(value)
            if value >= start and value < stop:
                return value
            raise ValueError("Not in <{0},{1}) range".format(start, stop))
        return validate_int_range

AparteSettings.add_setting("preferred_languages", type = list, default = [],
    validator = AparteSettings.validate_string_list,
    doc = """Language tags, most preferred first, used to select a localized
text (message bodies, error descriptions) when several are available."""
    )

AparteSettings.add_setting("default_query_timeout", type = float,
    validator = AparteSettings.validate_positive_float,
    doc = """Time in seconds to wait for an <iq/> response. `None` (the
default) means wait until the response arrives or the connection is lost."""
    )

# vi: sts=4 et sw=4
