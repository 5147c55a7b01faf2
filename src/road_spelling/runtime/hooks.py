# runtime/hooks.py


class NoopHooks:
    def run_start(self, **_):
        pass

    def run_end(self, **_):
        pass

    def segment_start(self, *_, **__):
        pass

    def flag(self, *_, **__):
        pass

    def error(self, *_, **__):
        pass
