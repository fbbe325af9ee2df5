#!/usr/bin/env python3
# zonevault.py - Main menu script for Route 53 zone backup and restore

"""
===========================
= ROUTE 53 ZONE VAULT =
===========================

Title: ZoneVault - Route 53 Backup & Restore Main Menu
Version: v0.1.0
Date: OCT-18-2026

Description:
Backs up every Route 53 hosted zone in the account to a portable JSON document,
optionally zips it and uploads it to S3, and restores zones from a previously
exported document.

Menu:
  [1] Export hosted zones to JSON
  [2] Zip the exported JSON
  [3] Upload the archive to S3
  [4] Restore zones from a JSON backup
  [5] Exit

Every action shares one BackupSession, so the export, archive and upload of a
run all use the same timestamped folder.
"""

import datetime
import sys
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

import utils
from zvlib import aws_client
from zvlib.archiver import archive_backup
from zvlib.config import config_value
from zvlib.exporter import export_zones
from zvlib.inventory import write_inventory
from zvlib.restorer import (
    RestoreMode,
    choose_zones,
    clean_path_input,
    load_backup,
    parse_restore_mode,
    restore_zones,
)
from zvlib.results import Outcome, StageResult
from zvlib.session import BackupSession
from zvlib.uploader import upload_backup

MENU_WIDTH = 70


# ---------------------------------------------------------------------------
# Visual helpers
# ---------------------------------------------------------------------------

def print_box(title: str, width: int = MENU_WIDTH):
    """Print a centred title inside a box."""
    print("╔" + "═" * (width - 2) + "╗")
    padding = (width - len(title) - 2) // 2
    print("║" + " " * padding + title + " " * (width - len(title) - padding - 2) + "║")
    print("╚" + "═" * (width - 2) + "╝")


def print_section(title: str, width: int = MENU_WIDTH):
    """Print a section divider with an ALL-CAPS label."""
    print("\n" + "═" * width)
    print(title)
    print("═" * width)


def report_result(result: StageResult) -> None:
    """Print a stage result and mirror it to the log."""
    if result.ok:
        print(f"\n[SUCCESS] {result.message}")
        utils.log_success(result.message)
    elif result.outcome is Outcome.NO_OP:
        print(f"\n[NO-OP] {result.message}")
        utils.log_info(result.message)
    else:
        label = result.outcome.value.upper()
        print(f"\n[FAILED - {label}] {result.message}")
        utils.log_error(f"{label}: {result.message}")


# ---------------------------------------------------------------------------
# Menu context
# ---------------------------------------------------------------------------

@dataclass
class MenuContext:
    """Everything a menu action needs: the run session, AWS clients and the prompt."""

    session: BackupSession
    account_id: Optional[str] = None
    prompt: Callable[[str], str] = input
    route53_factory: Callable[[], object] = aws_client.get_route53_client
    s3_factory: Callable[[], object] = aws_client.get_s3_client
    _clients: Dict[str, object] = field(default_factory=dict, repr=False)

    @property
    def route53(self):
        if "route53" not in self._clients:
            self._clients["route53"] = self.route53_factory()
        return self._clients["route53"]

    @property
    def s3(self):
        if "s3" not in self._clients:
            self._clients["s3"] = self.s3_factory()
        return self._clients["s3"]


# ---------------------------------------------------------------------------
# Menu actions
# ---------------------------------------------------------------------------

def handle_export(ctx: MenuContext) -> StageResult:
    """[1] Export every hosted zone to the session's JSON file."""
    print_section("EXPORTING HOSTED ZONES")
    result = export_zones(ctx.session, ctx.route53)
    if result.ok:
        print(f"Backup file: {result.path}")
        if config_value("write_inventory", True):
            inventory = write_inventory(result.details["zones"], ctx.session.inventory_path)
            if inventory:
                print(f"Inventory workbook: {inventory}")
            else:
                utils.log_warning("Inventory workbook was not written; the JSON backup is unaffected")
    return result


def handle_archive(ctx: MenuContext) -> StageResult:
    """[2] Zip the exported JSON."""
    print_section("CREATING BACKUP ARCHIVE")
    result = archive_backup(ctx.session)
    if result.ok:
        print(f"Archive: {result.path} ({utils.format_bytes(result.details['size_bytes'])})")
    return result


def handle_upload(ctx: MenuContext) -> StageResult:
    """[3] Upload the archive to an S3 bucket chosen by the user."""
    print_section("UPLOADING ARCHIVE TO S3")
    archive = ctx.session.archive_path
    if not archive.is_file():
        return StageResult(
            Outcome.PRECONDITION_FAILED,
            f"Archive {archive.name} not found. Run export and zip first.",
        )

    bucket_name = ctx.prompt("Enter the destination S3 bucket name: ")
    return upload_backup(ctx.session, ctx.s3, bucket_name)


def handle_restore(ctx: MenuContext) -> StageResult:
    """[4] Restore all or some zones from a JSON backup."""
    print_section("RESTORING ZONES FROM BACKUP")

    path = clean_path_input(ctx.prompt("Enter the path to the backup JSON file: "))
    loaded, zones = load_backup(path)
    if not loaded.ok:
        return loaded

    print(f"\nZones in {path.name}:")
    for zone in zones:
        print(f"  - {zone.zone_name} ({len(zone.changes)} record set(s))")

    print("\nRestore options:")
    print("  [1] All zones")
    print("  [2] Selected zones")
    mode_text = ctx.prompt("Select an option: ")
    names_csv = ""
    if parse_restore_mode(mode_text) is RestoreMode.SUBSET:
        names_csv = ctx.prompt("Enter zone names to restore (comma-separated): ")

    rejected, selected = choose_zones(zones, mode_text, names_csv)
    if rejected:
        return rejected

    utils.log_info(f"Restoring {len(selected)} zone(s): {', '.join(z.zone_name for z in selected)}")
    report = restore_zones(ctx.route53, selected, ctx.session)

    for zone_result in report.zones:
        status = "OK" if zone_result.ok else "FAILED"
        created = " (created)" if zone_result.created else ""
        print(f"  [{status}] {zone_result.zone_name}{created}: {zone_result.message}")

    return report.to_stage_result()


@dataclass(frozen=True)
class Command:
    name: str
    handler: Optional[Callable[[MenuContext], StageResult]]


COMMANDS: Dict[str, Command] = {
    "1": Command("Export hosted zones to JSON", handle_export),
    "2": Command("Zip the exported JSON", handle_archive),
    "3": Command("Upload the archive to S3", handle_upload),
    "4": Command("Restore zones from a JSON backup", handle_restore),
    "5": Command("Exit", None),
}


# ---------------------------------------------------------------------------
# Menu loop
# ---------------------------------------------------------------------------

def display_main_menu(ctx: MenuContext) -> None:
    print()
    print_box("ZONEVAULT")
    print(f"  Account: {ctx.account_id or 'UNKNOWN'}")
    print(f"  Backup folder: {ctx.session.work_dir}")
    print_section("MAIN MENU")
    for option, command in COMMANDS.items():
        print(f"  [{option}] {command.name}")
    print("─" * MENU_WIDTH)


def dispatch(ctx: MenuContext, choice: str) -> Optional[StageResult]:
    """
    Run the command for a menu choice.

    Returns:
        StageResult of the action, or None when the user chose Exit
    """
    command = COMMANDS.get(choice.strip())
    if command is None:
        return StageResult(Outcome.INVALID_INPUT, f"Invalid selection '{choice.strip()}'. Please try again.")

    utils.log_menu_selection(choice.strip(), command.name)
    if command.handler is None:
        return None

    utils.log_section(command.name.upper())
    try:
        return command.handler(ctx)
    except Exception as e:
        # Stages return their failures as results; this catches client
        # construction errors such as a missing profile
        utils.log_error(f"Unexpected error during '{command.name}'", e)
        return StageResult(Outcome.UNREACHABLE, f"{command.name} failed: {e}")


def run_menu(ctx: MenuContext) -> None:
    """Loop over the main menu until Exit is chosen."""
    while True:
        display_main_menu(ctx)
        choice = ctx.prompt("Select an option: ")
        result = dispatch(ctx, choice)
        if result is None:
            print("Exiting ZoneVault.")
            return
        report_result(result)


def main():
    """
    Main function to display the menu and handle action dispatch.
    """
    start_time = datetime.datetime.now()
    utils.setup_logging("zonevault", log_to_file=True)
    utils.log_script_start("zonevault.py", "Route 53 Backup & Restore Main Menu")
    utils.log_system_info()

    try:
        session = BackupSession.start(now=start_time)
        utils.log_info(f"Session folder: {session.work_dir}")

        valid, account_id, error = aws_client.validate_aws_credentials()
        if valid:
            utils.log_info(f"AWS account: {account_id}")
        else:
            utils.log_warning(f"Could not validate AWS credentials: {error}")

        run_menu(MenuContext(session=session, account_id=account_id, prompt=input))
    except (KeyboardInterrupt, EOFError):
        utils.log_info("User cancelled operation")
        print("\nOperation cancelled by user.")
    except Exception as e:
        print(f"Error in main function: {e}")
        utils.log_error("Error in main function", e)
        sys.exit(1)
    finally:
        utils.log_script_end("zonevault.py", start_time)


if __name__ == "__main__":
    main()
