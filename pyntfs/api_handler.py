import fnmatch
import logging

from pyntfs.logger import format_api_call

logger = logging.getLogger(__name__)

VAR_ARGS = -1


class CAPABILITY:
    GET = "get"
    APPLY = "apply"
    CONSTRUCT = "construct"


class EventEmitter(object):
    """
    Minimal synchronous pub/sub.  Listener patterns use fnmatch syntax,
    e.g. ``VFS::*`` or ``*::Delete*``.
    """

    def __init__(self):
        self.listeners = []

    def on(self, pattern, listener):
        self.listeners.append((pattern, listener))
        return listener

    def off(self, pattern, listener):
        self.listeners.remove((pattern, listener))

    def emit(self, event, *args):
        fired = 0
        for pattern, listener in list(self.listeners):
            if fnmatch.fnmatchcase(event, pattern):
                listener(event, *args)
                fired += 1
        return fired


class ApiHandler(object):
    """
    Base class for objects exposing named API calls.

    Methods tagged with ``@api_call`` are collected into ``funcs`` and
    reached through ``dispatch``, which announces every call on the
    event emitter before running it.
    """

    name = ''
    # name -> class, reachable through the "construct" capability
    constructors = {}

    @staticmethod
    def api_call(impname=None, argc=0, mutates=False):

        def api_call_wrapper(f):
            if not callable(f):
                raise Exception('Invalid function type supplied: %s' % (str(f)))
            f.__apicall__ = (impname or f.__name__, f, argc, mutates)
            return f

        return api_call_wrapper

    @staticmethod
    def get_api_name(func):
        return func.__apicall__[0]

    def __init__(self, emitter=None):
        super(ApiHandler, self).__init__()
        self.funcs = {}
        self.emitter = emitter or EventEmitter()
        self.__set_api_attrs__(self)

    def __set_api_attrs__(self, obj):
        # look the names up on the class so properties are not evaluated
        for name in dir(type(obj)):
            val = getattr(type(obj), name, None)
            if val is None:
                continue

            func_attrs = getattr(val, '__apicall__', None)
            if func_attrs:
                api_name, func, argc, mutates = func_attrs
                obj.funcs[api_name] = (api_name, func, argc, mutates)

    def call_api(self, api_name, *args):
        if api_name not in self.funcs:
            raise AttributeError("%s has no API '%s'" % (self.name or type(self).__name__, api_name))
        _, func, argc, mutates = self.funcs[api_name]
        if argc != VAR_ARGS and len(args) > argc:
            raise TypeError("%s takes at most %d argument(s) (%d given)" % (api_name, argc, len(args)))

        logger.log(logging.INFO if mutates else logging.DEBUG, format_api_call(api_name, args))
        self.emitter.emit("%s::%s" % (self.name, api_name), *args)
        return func(self, *args)

    def dispatch(self, capability, name, *args):
        """
        Route one intercepted interaction:

            get        read a public attribute of the handler
            apply      call a registered API with `args`
            construct  instantiate a registered class with `args`
        """
        if capability == CAPABILITY.APPLY:
            return self.call_api(name, *args)

        if capability == CAPABILITY.GET:
            if name.startswith("_"):
                raise AttributeError(name)
            self.emitter.emit("%s::get::%s" % (self.name, name))
            return getattr(self, name)

        if capability == CAPABILITY.CONSTRUCT:
            if name not in self.constructors:
                raise AttributeError("%s cannot construct '%s'" % (self.name or type(self).__name__, name))
            self.emitter.emit("%s::new::%s" % (self.name, name), *args)
            return self.constructors[name](*args)

        raise ValueError("unknown capability '%s'" % capability)
