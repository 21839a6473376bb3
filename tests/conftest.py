from hypothesis import HealthCheck, settings

# Cold-start imports can make the first generated example slow; that is not a test failure.
settings.register_profile("default", suppress_health_check=[HealthCheck.too_slow])
settings.load_profile("default")
