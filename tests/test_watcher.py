from tilemap3d.watcher import ValueWatcher


class Recorder:
    def __init__(self):
        self.seen = []

    def on_change(self, value):
        self.seen.append(value)


def test_initial_value_without_notification():
    recorder = Recorder()
    watcher = ValueWatcher("start", recorder.on_change)
    assert watcher.value == "start"
    assert recorder.seen == []


def test_assignment_notifies_with_new_value():
    recorder = Recorder()
    watcher = ValueWatcher(False)
    watcher.bind(recorder.on_change)
    watcher.value = True
    assert watcher.value is True
    assert recorder.seen == [True]


def test_same_value_notifies_again():
    recorder = Recorder()
    watcher = ValueWatcher(1, recorder.on_change)
    watcher.value = 2
    watcher.value = 2
    assert recorder.seen == [2, 2]


def test_unbound_assignment_stores_value():
    watcher = ValueWatcher()
    watcher.value = "x"
    assert watcher.value == "x"
    assert watcher.is_bound() is False


def test_bind_replaces_callback():
    first, second = Recorder(), Recorder()
    watcher = ValueWatcher(0, first.on_change)
    watcher.bind(second.on_change)
    watcher.value = 5
    assert first.seen == []
    assert second.seen == [5]


def test_unbind_owner_only_when_bound_to_it():
    owner, other = Recorder(), Recorder()
    watcher = ValueWatcher(0, owner.on_change)
    watcher.unbind(other)
    assert watcher.is_bound() is True
    watcher.unbind(owner)
    assert watcher.is_bound() is False
    watcher.value = 3
    assert owner.seen == []


def test_unbind_without_owner_clears():
    seen = []
    watcher = ValueWatcher(0, seen.append)
    watcher.unbind()
    watcher.value = 9
    assert seen == []
    assert watcher.binding is None