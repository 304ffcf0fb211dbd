import gevent
import gevent.queue
from werkzeug.local import Local, LocalProxy


local = Local()
ctx = LocalProxy(local, 'ctx')

def set_context(ctx):
    local.ctx = ctx


class Context(object):
    """Collects what happens while the node starts, for whoever started
    it (usually the CLI) to render.

    Each event is a dict with one key, the kind of event:

    job
        Header for the events that follow.
    log, error
        Progress and failures.
    debug, trace, warn
        Diagnostics; the message may use ``{}`` placeholders, filled
        from the extra arguments.
    """

    def __init__(self):
        self.queue = gevent.queue.Queue()

    def custom(self, **obj):
        self.queue.put(obj)
        gevent.sleep(0)

    def emit(self, kind, msg, *args):
        if args:
            msg = msg.format(*args)
        self.custom(**{kind: msg})

    def job(self, name):
        self.emit('job', name)

    def log(self, msg):
        self.emit('log', msg)

    def error(self, msg):
        self.emit('error', msg)

    def debug(self, msg, *args):
        self.emit('debug', msg, *args)

    def trace(self, msg, *args):
        self.emit('trace', msg, *args)

    def warn(self, msg, *args):
        self.emit('warn', msg, *args)

    def done(self):
        """No more events; ends iteration."""
        self.queue.put(StopIteration)

    def __iter__(self):
        return iter(self.queue)


class NullContext(Context):
    """Drops everything."""

    def custom(self, **obj):
        pass
