"""Provisioning steps and their default order."""

from tarbs.core.credentials import PromptFunc, hidden_prompt
from tarbs.core.pipeline import Step
from tarbs.steps.account import FINAL_POLICY, INSTALL_POLICY, add_user, make_sudoers_step
from tarbs.steps.bootloader import install_grub
from tarbs.steps.dotfiles import install_antibody, install_dotfiles
from tarbs.steps.packages import bootstrap_aur_helper, install_packages, refresh_keys
from tarbs.steps.preflight import (
    initial_check,
    make_password_step,
    prepare_package_list,
    user_check,
)
from tarbs.steps.system import (
    enable_services,
    generate_locale,
    miscellaneous,
    set_hostname,
    set_timezone,
)


def default_steps(prompt: PromptFunc = hidden_prompt) -> list[Step]:
    """Return the provisioning steps in execution order.

    Args:
        prompt: Hidden-input prompt used for the password.
    """
    return [
        Step("initial check", "Initial check", initial_check, fatal=True),
        Step("user check", "Checking user", user_check, fatal=True),
        Step("password", "Setting password", make_password_step(prompt), fatal=True),
        Step("package list", "Preparing package list", prepare_package_list, fatal=True),
        Step("add user", "Adding user", add_user),
        Step("sudoers", "Setting sudoers", make_sudoers_step(INSTALL_POLICY)),
        Step("aur helper", "Installing yay", bootstrap_aur_helper, fatal=True),
        Step("keyring", "Refreshing Arch Linux keyring", refresh_keys),
        Step("packages", "Installing packages", install_packages),
        Step("dotfiles", "Installing dotfiles", install_dotfiles),
        Step("antibody", "Installing antibody zsh plugin manager", install_antibody),
        Step("sudoers", "Setting sudoers", make_sudoers_step(FINAL_POLICY)),
        Step("services", "Enabling services", enable_services),
        Step("miscellaneous", "Setting miscellaneous stuff", miscellaneous),
        Step("timezone", "Setting timezone", set_timezone),
        Step("locale", "Generating locale", generate_locale),
        Step("hostname", "Setting hostname", set_hostname),
        Step("bootloader", "Installing GRUB", install_grub),
    ]


__all__ = ["default_steps"]
