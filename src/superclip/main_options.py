"""Click option type for the command's mutually exclusive actions."""
import click


def _flag(ctx: click.Context, name: str) -> str:
    """Return the command-line spelling of the parameter called name."""
    for param in ctx.command.params:
        if param.name == name and param.opts:
            return param.opts[0]
    return "--" + name.replace("_", "-")


class MutuallyExclusiveOption(click.Option):
    """Option that refuses to be combined with any option in not_required_if."""

    def __init__(self, *args, **kwargs):
        self.not_required_if = kwargs.pop("not_required_if", [])
        super().__init__(*args, **kwargs)

    def handle_parse_result(self, ctx, opts, args):
        if self.name in opts:
            clash = next(
                (n for n in self.not_required_if if n != self.name and n in opts),
                None,
            )
            if clash is not None:
                raise click.UsageError(
                    f"Options {_flag(ctx, self.name)} and {_flag(ctx, clash)}"
                    " are mutually exclusive",
                    ctx=ctx,
                )
        return super().handle_parse_result(ctx, opts, args)
