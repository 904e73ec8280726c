# Firebase project migration toolkit
#
# Copies Firestore collections, Storage objects and Auth users from one
# Firebase project to another, and wipes the source once the copy is verified.
#
# Usage:
#   python -m firemigrate.commands.wait_and_check
#   python -m firemigrate.commands.inspect_project source
#   python -m firemigrate.commands.migrate full
#   python -m firemigrate.commands.cleanup full
