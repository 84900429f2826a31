from ros2topics.cli import main

main(prog_name="ros2topics")
