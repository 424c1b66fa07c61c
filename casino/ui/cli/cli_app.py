"""赌场命令解释器CLI界面.

这个模块提供命令行入口：执行脚本文件、交互式逐行执行命令以及输出示例脚本。
CLI只负责读入文本和显示结果，所有命令都交给CommandExecutor执行。
"""

import logging
import sys
from typing import Callable, Optional, TextIO

import click

from casino.application import (
    CommandExecutor,
    CommandResult,
    ConfigType,
    configure_logging,
    example_script,
    get_config_service,
)
from casino.core.commands import is_blank_or_comment
from casino.ui.cli.render import CLIRenderer

_EXIT_WORDS = ('quit', 'exit')


class CasinoCLI:
    """赌场命令解释器CLI.

    持有一个命令执行会话，并把每条命令的结果渲染到输出函数。
    """

    def __init__(self, profile: str = "default", echo: Callable[[str], None] = click.echo):
        """初始化CLI.

        Args:
            profile: 命令执行配置名
            echo: 输出函数
        """
        self.logger = logging.getLogger(__name__)
        config = get_config_service().get_executor_config(profile).data
        self.executor = CommandExecutor(config=config)
        self.echo = echo
        self.failures = 0

    def run_script(self, text: str, stop_on_error: bool = False) -> int:
        """执行脚本文本.

        Args:
            text: 多行命令文本
            stop_on_error: 遇到第一条失败命令时停止

        Returns:
            失败命令数
        """
        for line_number, result in self.executor.iter_script(text, stop_on_error=stop_on_error):
            self._show(result, line_number)
        return self.failures

    def run_interactive(self, stream: Optional[TextIO] = None) -> int:
        """交互式执行命令，直到输入quit/exit或输入结束.

        Returns:
            失败命令数
        """
        interactive = stream is None and sys.stdin.isatty()
        source = stream or click.get_text_stream('stdin')

        while True:
            if interactive:
                try:
                    line = click.prompt("casino", prompt_suffix="> ", default="", show_default=False)
                except click.Abort:
                    break
            else:
                line = source.readline()
                if not line:
                    break
            line = line.strip()
            if line in _EXIT_WORDS:
                break
            if is_blank_or_comment(line):
                continue
            self._show(self.executor.execute_line(line))
        return self.failures

    def _show(self, result: CommandResult, line_number: Optional[int] = None) -> None:
        if not result.success:
            self.failures += 1
        self.echo(CLIRenderer.render_result(result, line_number))


@click.group()
@click.option('--profile', default='default', show_default=True,
              help='命令执行配置名 (default, lenient)')
@click.option('--log-level', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='覆盖日志级别')
@click.pass_context
def cli(ctx: click.Context, profile: str, log_level: Optional[str]) -> None:
    """赌场运营模拟命令解释器."""
    config_service = get_config_service()
    if log_level is not None:
        config_service.update_config(ConfigType.LOGGING, 'cli', {'log_level': log_level})
        configure_logging(config_service.get_logging_config('cli').data)
    else:
        configure_logging(config_service.get_logging_config('quiet').data)
    ctx.obj = {'profile': profile}


@cli.command('run')
@click.argument('script', type=click.File('r', encoding='utf-8'))
@click.option('--stop-on-error', is_flag=True, help='遇到第一条失败命令时停止')
@click.pass_context
def run_command(ctx: click.Context, script: TextIO, stop_on_error: bool) -> None:
    """执行脚本文件中的命令（'-' 表示标准输入）."""
    app = CasinoCLI(profile=ctx.obj['profile'])
    failures = app.run_script(script.read(), stop_on_error=stop_on_error)
    if failures:
        click.echo(f"{failures} 条命令执行失败", err=True)
        ctx.exit(1)


@cli.command('repl')
@click.pass_context
def repl_command(ctx: click.Context) -> None:
    """交互式执行命令，输入quit退出."""
    app = CasinoCLI(profile=ctx.obj['profile'])
    app.run_interactive()


@cli.command('examples')
def examples_command() -> None:
    """输出示例脚本."""
    click.echo(example_script(), nl=False)


def main():
    """CLI主入口."""
    cli(prog_name='casino-sim')


if __name__ == "__main__":
    main()
