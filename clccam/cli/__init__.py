"""
camsole - command-line console for CAM.
"""
