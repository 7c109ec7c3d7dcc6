pytest_plugins = ["flagsync.testing.fixtures"]
