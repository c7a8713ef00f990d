from rich.pretty import pprint

from switchyard import *

router = Router("yard", version="yard 0.0.0", shell=True, colorful=True)
router.add_global("-q", "--quiet")
router.add_category("db", "Database", "manage the database")


@router.command("build", shortcuts=["b"], value_flags=["--out"])
def build(request):
    """compile the sources into the output directory"""
    request.require_params(1)
    pprint(request)


@router.command("db migrate", value_flags=["--to"])
def migrate(request):
    """apply pending migrations"""
    pprint(request)


@router.helper
def helper(subject, router):
    pprint(subject)


if __name__ == '__main__':
    router.run()
