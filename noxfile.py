import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13", "3.14"]


def _install(session: nox.Session) -> None:
    """Install the project with its test extra into the nox virtualenv."""
    session.install("-e", ".[test]")


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest")


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run domain-layer tests only (no HTTP, no adapters)."""
    _install(session)
    session.run("pytest", "-m", "domain")


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_settlement(session: nox.Session) -> None:
    """Run the payment verification suite: signature, settlement and the BDD scenario."""
    _install(session)
    session.run(
        "pytest",
        "tests/billing/domain/test_payment_signature.py",
        "tests/billing/application/test_verify_payment.py",
        "tests/billing/integration/test_payment_api.py",
        "tests/billing/bdd/",
    )
