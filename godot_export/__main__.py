from godot_export.cli.app import main

main()
