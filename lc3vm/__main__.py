from .kernel import CalystoLC3VM

if __name__ == '__main__':
    CalystoLC3VM.run_as_main()
