"""Main CLI application using Cyclopts."""

import cyclopts

from kubecatalog.cli.commands import classify, config, transform

app = cyclopts.App(
    name="kubecatalog",
    help="Turn Crossplane XRDs and Kubernetes CRDs into catalog Templates and APIs",
)

app.command(transform.app, name="transform")
app.command(classify.app, name="classify")
app.command(config.app, name="config")
