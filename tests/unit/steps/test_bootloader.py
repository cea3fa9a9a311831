"""Unit tests for the GRUB bootloader step."""

from pathlib import Path

from fakes import ContextFactory, FakeShell

from tarbs.steps.bootloader import GRUB_PACKAGES, install_grub


class TestInstallGrub:
    """Tests for install_grub()."""

    def test_skipped_without_grub(
        self, make_context: ContextFactory, fake_shell: FakeShell
    ) -> None:
        """Nothing happens unless GRUB was requested."""
        assert install_grub(make_context()).skipped
        assert fake_shell.calls == []

    def test_bios(self, make_context: ContextFactory, fake_shell: FakeShell) -> None:
        """On BIOS GRUB is installed to the disk holding /."""
        fake_shell.respond(("df",), stdout="Filesystem Mounted on\n/dev/sda2 /\n")
        ctx = make_context(grub=True)

        result = install_grub(ctx)

        assert result.success
        for name in GRUB_PACKAGES:
            assert ("pacman", "--noconfirm", "--needed", "-S", name) in fake_shell.commands
        assert ("grub-install", "--target=i386-pc", "/dev/sda") in fake_shell.commands
        assert fake_shell.commands[-1] == ("grub-mkconfig", "-o", str(ctx.paths.grub_cfg))

    def test_bios_without_root_device(
        self, make_context: ContextFactory, fake_shell: FakeShell
    ) -> None:
        """An unknown root device fails the step."""
        fake_shell.respond(("df",), returncode=1)

        result = install_grub(make_context(grub=True))

        assert result.failed
        assert "root device" in (result.error or "")

    def test_uefi_mounts_and_installs(
        self, tmp_path: Path, make_context: ContextFactory, fake_shell: FakeShell
    ) -> None:
        """On UEFI the partition is mounted and GRUB installed as EFI application."""
        efi_dir = tmp_path / "efi"
        fake_shell.respond(("df",), stdout="Filesystem Mounted on\n/dev/sda2 /\n")
        ctx = make_context(grub=True, efi_dir=efi_dir, efi_partition="/dev/sda1")
        ctx.paths.firmware_efi.mkdir(parents=True)

        result = install_grub(ctx)

        assert result.success
        assert ("pacman", "--noconfirm", "--needed", "-S", "efibootmgr") in fake_shell.commands
        assert ("mkdir", "-p", str(efi_dir)) in fake_shell.commands
        assert ("mount", "/dev/sda1", str(efi_dir)) in fake_shell.commands
        assert (
            "grub-install",
            f"--efi-directory={efi_dir}",
            "--bootloader-id=GRUB",
            "--target=x86_64-efi",
        ) in fake_shell.commands

    def test_uefi_already_mounted(
        self, tmp_path: Path, make_context: ContextFactory, fake_shell: FakeShell
    ) -> None:
        """A partition already mounted at the EFI directory is not mounted again."""
        efi_dir = tmp_path / "efi"
        efi_dir.mkdir()
        fake_shell.respond(("df",), stdout=f"Filesystem Mounted on\n/dev/sda1 {efi_dir}\n")
        ctx = make_context(grub=True, efi_dir=efi_dir, efi_partition="/dev/sda1")
        ctx.paths.firmware_efi.mkdir(parents=True)

        assert install_grub(ctx).success
        assert fake_shell.calls_starting_with("mount") == []
        assert fake_shell.calls_starting_with("mkdir") == []

    def test_grub_install_failure(
        self, make_context: ContextFactory, fake_shell: FakeShell
    ) -> None:
        """A failing grub-install fails the step without generating a config."""
        fake_shell.respond(("df",), stdout="Filesystem Mounted on\n/dev/nvme0n1p2 /\n")
        fake_shell.respond(("grub-install",), returncode=1, stderr="grub-install: error: no disk")

        result = install_grub(make_context(grub=True))

        assert result.failed
        assert "/dev/nvme0n1" in (result.error or "")
        assert fake_shell.calls_starting_with("grub-mkconfig") == []
