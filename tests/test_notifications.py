from storefront.notifications import NotificationChannel, NotificationKind


def test_new_notification_replaces_old(clock):
    channel = NotificationChannel(clock=clock)
    channel.success("first")
    second = channel.error("second")

    assert channel.active == second
    assert channel.active.kind is NotificationKind.ERROR


def test_expires_after_timeout(clock):
    channel = NotificationChannel(timeout=3.0, clock=clock)
    channel.success("hello")

    clock.advance(2.9)
    assert channel.active is not None
    clock.advance(0.2)
    assert channel.active is None


def test_dismiss_is_idempotent(clock):
    channel = NotificationChannel(clock=clock)
    seen = []
    channel.subscribe(seen.append)
    note = channel.success("hello")

    assert channel.dismiss(note.id) is True
    assert channel.dismiss(note.id) is False
    assert channel.dismiss() is False
    assert seen == [note, None]


def test_stale_dismiss_keeps_newer_notification(clock):
    channel = NotificationChannel(clock=clock)
    old = channel.success("old")
    new = channel.success("new")

    assert channel.dismiss(old.id) is False
    assert channel.active == new


def test_dismiss_after_expiry_has_no_effect(clock):
    channel = NotificationChannel(timeout=3.0, clock=clock)
    note = channel.success("hello")
    clock.advance(5)

    assert channel.dismiss(note.id) is False
