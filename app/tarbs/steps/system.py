"""System settings steps: timezone, locale, hostname, services, misc.

Each step returns immediately with a skipped result when its setting
is unset.
"""

import logging
import re

from tarbs.core.context import ProvisionContext
from tarbs.models.result import StepResult, step_failed, step_ok, step_skipped
from tarbs.utils.files import force_symlink, substitute_in_file, write_file

logger = logging.getLogger(__name__)

USER_DIRECTORIES = (
    ".config/zsh",
    ".local/share/zsh",
    ".config/notmuch",
    ".config/newsboat",
    ".local/share/newsboat",
    "dl",
    "docs",
    "music",
    "pics",
)


def set_timezone(ctx: ProvisionContext) -> StepResult:
    """Point /etc/localtime at the zoneinfo entry and sync the hardware clock."""
    timezone = ctx.config.timezone
    if timezone is None:
        return step_skipped("timezone")

    try:
        force_symlink(ctx.paths.zoneinfo / timezone, ctx.paths.localtime, dry_run=ctx.dry_run)
    except OSError as e:
        return step_failed("timezone", str(e))

    clock = ctx.shell.run(["hwclock", "--systohc"])
    if not clock.success:
        return step_failed("timezone", f"hwclock failed: {clock.error_message}")
    return step_ok("timezone", timezone)


def generate_locale(ctx: ProvisionContext) -> StepResult:
    """Enable the locale in locale.gen, generate it and make it the default."""
    locale = ctx.config.locale
    if locale is None:
        return step_skipped("locale")

    try:
        substitute_in_file(
            ctx.paths.locale_gen,
            rf"^#\s*({re.escape(locale)}[.\s@])",
            r"\1",
            dry_run=ctx.dry_run,
        )
    except OSError as e:
        return step_failed("locale", str(e))

    generated = ctx.shell.run(["locale-gen"])
    if not generated.success:
        return step_failed("locale", f"locale-gen failed: {generated.error_message}")

    try:
        write_file(
            ctx.paths.locale_conf,
            f"LANG={locale}.UTF-8\nLC_ALL={locale}.UTF-8\n",
            dry_run=ctx.dry_run,
        )
    except OSError as e:
        return step_failed("locale", str(e))
    return step_ok("locale", f"{locale}.UTF-8")


def set_hostname(ctx: ProvisionContext) -> StepResult:
    """Write /etc/hostname and a matching /etc/hosts."""
    hostname = ctx.config.hostname
    if hostname is None:
        return step_skipped("hostname")

    hosts = (
        "127.0.0.1 localhost\n"
        "::1 localhost\n"
        f"127.0.1.1 {hostname}.localdomain {hostname}\n"
    )
    try:
        write_file(ctx.paths.hostname, f"{hostname}\n", dry_run=ctx.dry_run)
        write_file(ctx.paths.hosts, hosts, dry_run=ctx.dry_run)
    except OSError as e:
        return step_failed("hostname", str(e))
    return step_ok("hostname", hostname)


def enable_services(ctx: ProvisionContext) -> StepResult:
    """Enable and start every configured systemd unit."""
    services = ctx.config.services
    if not services:
        return step_skipped("services")

    failed: list[str] = []
    for service in services:
        logger.info('Enabling "%s"', service)
        for action in ("enable", "start"):
            result = ctx.shell.run(["systemctl", action, service])
            if not result.success:
                failed.append(f"{action} {service}: {result.error_message}")

    if failed:
        return step_failed("services", "; ".join(failed))
    return step_ok("services", ", ".join(services))


def _disable_beep(ctx: ProvisionContext) -> None:
    # pcspkr is often not loaded at all
    unloaded = ctx.shell.run(["rmmod", "pcspkr"])
    if not unloaded.success:
        logger.debug("rmmod pcspkr: %s", unloaded.error_message)
    write_file(ctx.paths.modprobe_dir / "nobeep.conf", "blacklist pcspkr\n", dry_run=ctx.dry_run)


def _reset_pulse(ctx: ProvisionContext) -> list[str]:
    if not ctx.paths.pulseaudio.exists():
        return []
    logger.info("Resetting Pulseaudio")
    ctx.shell.run(["killall", "pulseaudio"])
    started = ctx.shell.run(["pulseaudio", "--start"], user=ctx.user)
    if not started.success:
        return [f"pulseaudio: {started.error_message}"]
    return []


def miscellaneous(ctx: ProvisionContext) -> StepResult:
    """Apply small system tweaks and create the user's directories.

    - ``/bin/sh`` links to dash
    - the PC speaker is disabled
    - pulseaudio is restarted when installed
    - pacman output is colored
    - pulseaudio autospawn is disabled
    """
    errors: list[str] = []

    try:
        force_symlink(ctx.paths.dash, ctx.paths.bin_sh, dry_run=ctx.dry_run)
        _disable_beep(ctx)
    except OSError as e:
        errors.append(str(e))

    errors.extend(_reset_pulse(ctx))

    for path, pattern, replacement in (
        (ctx.paths.pacman_conf, r"^#Color", "Color"),
        (ctx.paths.pulse_client_conf, r"^ autospawn", "; autospawn"),
    ):
        if not path.exists():
            logger.debug("%s not found, skipping", path)
            continue
        try:
            substitute_in_file(path, pattern, replacement, dry_run=ctx.dry_run)
        except OSError as e:
            errors.append(str(e))

    directories = [str(ctx.home / sub) for sub in USER_DIRECTORIES]
    created = ctx.shell.run(["mkdir", "-p", *directories], user=ctx.user)
    if not created.success:
        errors.append(f"mkdir failed: {created.error_message}")

    if errors:
        return step_failed("miscellaneous", "; ".join(errors))
    return step_ok("miscellaneous")
